import pytest

from cfping.resultmodel import PingResult, PingResultModel


def _filled(latencies, max_display_count=100):
    model = PingResultModel(max_display_count=max_display_count)
    for i, latency in enumerate(latencies):
        model.add_result(PingResult(f"10.0.0.{i}", latency, True))
    model.process_pending_updates()
    return model


def test_failures_are_ignored():
    model = PingResultModel()
    model.add_result(PingResult("10.0.0.1", 5.0, False))
    model.add_result(PingResult("10.0.0.2", 7.0, True))
    assert model.process_pending_updates() == 1
    assert model.all_ips() == ["10.0.0.2"]


def test_results_wait_until_processed():
    model = PingResultModel()
    model.add_result(PingResult("10.0.0.1", 3.0, True))
    assert model.row_count() == 0
    model.process_pending_updates()
    assert model.row_count() == 1


def test_sorted_by_latency():
    model = _filled([30.0, 10.0, 20.0])
    shown = [float(model.data(r, 1)) for r in range(model.row_count())]
    assert shown == sorted(shown)
    assert model.all_ips() == ["10.0.0.1", "10.0.0.2", "10.0.0.0"]


def test_sorting_holds_across_batches():
    model = _filled([50.0, 40.0])
    model.add_result(PingResult("10.0.1.1", 1.0, True))
    model.process_pending_updates()
    assert model.all_ips()[0] == "10.0.1.1"


def test_truncates_when_over_twice_limit():
    model = _filled([7.0, 1.0, 6.0, 2.0, 5.0, 3.0, 4.0], max_display_count=3)
    assert model.row_count() == 3
    assert model.all_ips() == ["10.0.0.1", "10.0.0.3", "10.0.0.5"]


def test_keeps_all_up_to_twice_limit():
    model = _filled([6.0, 5.0, 4.0, 3.0, 2.0, 1.0], max_display_count=3)
    assert model.row_count() == 6


def test_data_cells():
    model = PingResultModel()
    model.add_result(PingResult("10.0.0.9", 12.5, True))
    model.process_pending_updates()
    assert model.data(0, 0) == "10.0.0.9"
    assert model.data(0, 1) == "12.50"
    assert model.data(0, 2) == "已连接"
    assert model.data(0, 3) is None
    assert model.data(1, 0) is None


def test_tooltip_names_protocol():
    model = PingResultModel()
    model.add_result(PingResult("2606:4700::1", 1.0, True))
    model.add_result(PingResult("10.0.0.1", 2.0, True))
    model.process_pending_updates()
    assert model.tooltip(0) == "2606:4700::1 (IPv6)"
    assert model.tooltip(1) == "10.0.0.1 (IPv4)"
    assert model.tooltip(2) is None


def test_headers_and_columns():
    model = PingResultModel()
    assert model.column_count() == 3
    assert model.header_data(0) == "IP地址 (IPv4/IPv6)"
    assert model.header_data(1) == "延迟 (毫秒)"
    assert model.header_data(2) == "状态"
    assert model.header_data(3) is None


def test_selected_ips_skips_out_of_range():
    model = _filled([3.0, 1.0, 2.0])
    assert model.selected_ips([0, 2, 9, -1]) == ["10.0.0.1", "10.0.0.0"]
    assert model.selected_ips([]) == []


def test_clear_drops_everything():
    model = _filled([1.0, 2.0])
    model.add_result(PingResult("10.0.0.99", 0.5, True))
    model.clear()
    assert model.row_count() == 0
    assert model.process_pending_updates() == 0
    assert model.all_ips() == []


def test_ping_result_defaults():
    result = PingResult()
    assert (result.ip, result.latency, result.success) == ("", 0.0, False)


def test_invalid_limit_rejected():
    with pytest.raises(ValueError):
        PingResultModel(max_display_count=0)