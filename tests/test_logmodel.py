import threading

import pytest

from cfping.logmodel import LogEntry, LogModel


def test_messages_wait_until_processed():
    model = LogModel()
    model.add_log_message("one")
    model.add_log_message("two")
    assert model.row_count() == 0
    assert model.process_pending_updates() == 2
    assert model.row_count() == 2
    assert [e.message for e in model.entries()] == ["one", "two"]


def test_processing_without_pending_returns_zero():
    model = LogModel()
    assert model.process_pending_updates() == 0
    assert model.row_count() == 0


def test_keeps_only_newest_entries():
    model = LogModel(max_log_count=5)
    messages = [f"m{i}" for i in range(8)]
    for message in messages:
        model.add_log_message(message)
    model.process_pending_updates()
    assert [e.message for e in model.entries()] == messages[-5:]


def test_limit_applies_across_batches():
    model = LogModel(max_log_count=3)
    for batch in (["a", "b"], ["c", "d"]):
        for message in batch:
            model.add_log_message(message)
        model.process_pending_updates()
    assert [e.message for e in model.entries()] == ["b", "c", "d"]


def test_clear_drops_visible_and_pending():
    model = LogModel()
    model.add_log_message("shown")
    model.process_pending_updates()
    model.add_log_message("pending")
    model.clear()
    assert model.row_count() == 0
    assert model.process_pending_updates() == 0


def test_data_cells():
    model = LogModel()
    model.add_log_message("hello")
    model.process_pending_updates()
    entry = model.entries()[0]
    assert model.data(0, 1) == "hello"
    assert model.data(0, 0) == entry.timestamp.strftime("%H:%M:%S")
    assert model.data(1, 0) is None
    assert model.data(-1, 1) is None
    assert model.data(0, 2) is None


def test_headers_and_columns():
    model = LogModel()
    assert model.column_count() == 2
    assert model.header_data(0) == "时间"
    assert model.header_data(1) == "日志消息"
    assert model.header_data(2) is None


def test_entries_is_a_copy():
    model = LogModel()
    model.add_log_message("x")
    model.process_pending_updates()
    copy = model.entries()
    copy.clear()
    assert model.row_count() == 1


def test_log_entry_default_message():
    entry = LogEntry()
    assert entry.message == ""


def test_invalid_limit_rejected():
    with pytest.raises(ValueError):
        LogModel(max_log_count=0)


def test_concurrent_adds_are_all_kept():
    model = LogModel(max_log_count=1000)

    def worker(tag):
        for i in range(50):
            model.add_log_message(f"{tag}-{i}")

    threads = [threading.Thread(target=worker, args=(t,)) for t in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert model.process_pending_updates() == 4 * 50
    assert model.row_count() == 4 * 50