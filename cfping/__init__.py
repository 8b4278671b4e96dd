"""TCP connect latency scanning over IPv4 and IPv6 CIDR ranges, as a command and a library."""

__version__ = "1.0.0"