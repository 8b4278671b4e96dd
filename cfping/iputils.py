"""Address and CIDR helpers for IPv4 and IPv6."""

from __future__ import annotations

import ipaddress
import re
from itertools import islice
from typing import Iterator, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_PREFIX_RE = re.compile(r"[+-]?\d+")
_IPV4_MASK = 0xFFFFFFFF
_IPV6_MASK = (1 << 128) - 1


def _split_cidr(cidr: str) -> tuple[str, int]:
    """Split ``address/prefix`` into its parts, raising ValueError if malformed."""
    parts = cidr.split("/")
    if len(parts) != 2:
        raise ValueError(f"not a CIDR block: {cidr!r}")
    prefix_text = parts[1].strip()
    if not _PREFIX_RE.fullmatch(prefix_text):
        raise ValueError(f"invalid prefix length in {cidr!r}")
    return parts[0], int(prefix_text)


def is_valid_ip(ip: str) -> bool:
    """Return True if *ip* is a valid IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(ip.strip())
    except ValueError:
        return False
    return True


def is_ipv6(ip: str) -> bool:
    """Return True if *ip* looks like an IPv6 address."""
    return ":" in ip


def is_valid_cidr(cidr: str) -> bool:
    """Return True if *cidr* is a well-formed IPv4 or IPv6 CIDR block."""
    try:
        address, prefix = _split_cidr(cidr)
    except ValueError:
        return False
    limit = 128 if is_ipv6(address) else 32
    return 0 <= prefix <= limit and is_valid_ip(address)


def ip_to_uint32(ip: str) -> int:
    """Convert a dotted-quad IPv4 address to an integer."""
    parts = ip.split(".")
    if len(parts) != 4:
        raise ValueError(f"not an IPv4 address: {ip!r}")
    result = 0
    for part in parts:
        text = part.strip()
        if not text.isdigit():
            raise ValueError(f"invalid octet {part!r} in {ip!r}")
        octet = int(text)
        if octet > 255:
            raise ValueError(f"octet out of range in {ip!r}")
        result = (result << 8) | octet
    return result


def uint32_to_ip(value: int) -> str:
    """Format a 32-bit integer as a dotted-quad IPv4 address."""
    value &= _IPV4_MASK
    return ".".join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def string_to_ip(ip: str) -> IPAddress:
    """Parse an address string into an address object."""
    if is_ipv6(ip):
        return ipaddress.IPv6Address(ip.strip().split("%", 1)[0])
    return ipaddress.IPv4Address(ip_to_uint32(ip))


def ip_to_string(ip: IPAddress) -> str:
    """Format an address object as text."""
    if ip.version == 4:
        return uint32_to_ip(int(ip))
    return str(ip)


def increment_ip(ip: IPAddress) -> IPAddress:
    """Return the next address, wrapping around at the top of the space."""
    if ip.version == 4:
        return ipaddress.IPv4Address((int(ip) + 1) & _IPV4_MASK)
    return ipaddress.IPv6Address((int(ip) + 1) & _IPV6_MASK)


def compare_ip(ip1: IPAddress, ip2: IPAddress) -> bool:
    """Return True if both addresses share a family and *ip1* <= *ip2*."""
    if ip1.version != ip2.version:
        return False
    return int(ip1) <= int(ip2)


def cidr_to_range(cidr: str) -> tuple[IPAddress, IPAddress]:
    """Return the first and last address of a CIDR block."""
    address, prefix = _split_cidr(cidr)
    base = string_to_ip(address)
    if not 0 <= prefix <= base.max_prefixlen:
        raise ValueError(f"prefix length out of range in {cidr!r}")
    network = ipaddress.ip_network((base, prefix), strict=False)
    return network.network_address, network.broadcast_address


def cidr_ip_count(cidr: str) -> int | None:
    """Return the number of addresses in a CIDR block.

    IPv6 blocks with a prefix of 64 or shorter are too large to count and
    give None.
    """
    address, prefix = _split_cidr(cidr)
    if is_ipv6(address):
        if not 0 <= prefix <= 128:
            raise ValueError(f"prefix length out of range in {cidr!r}")
        if prefix <= 64:
            return None
        return 1 << (128 - prefix)
    if not 0 <= prefix <= 32:
        raise ValueError(f"prefix length out of range in {cidr!r}")
    return 1 << (32 - prefix)


def _iter_range(start: IPAddress, end: IPAddress) -> Iterator[IPAddress]:
    current = start
    while compare_ip(current, end):
        yield current
        if current == end:
            return
        current = increment_ip(current)


def expand_cidr(cidr: str, max_ips: int = -1) -> list[str]:
    """Expand a CIDR block into address strings, at most *max_ips* if positive."""
    start, end = cidr_to_range(cidr)
    addresses = _iter_range(start, end)
    if max_ips > 0:
        addresses = islice(addresses, max_ips)
    return [ip_to_string(ip) for ip in addresses]


def calculate_latency(start: float, end: float) -> float:
    """Milliseconds between two monotonic timestamps in seconds, to the microsecond."""
    microseconds = int((end - start) * 1_000_000)
    return microseconds / 1000.0