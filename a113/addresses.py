"""Conversions between binary and text forms of IPv4 and Bluetooth addresses."""

from __future__ import annotations

import re

_IPV4_TEXT_LIMIT = 4 * 3 + 3
_ATOI = re.compile(r"\s*([+-]?\d+)")
_BT_SCAN = re.compile(r"\s*([+-]?\d+)" + r":\s*([+-]?\d+)" * 5)


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def ipv4_to_str(addr: int) -> str:
    """Render a 32-bit address held with its first octet in the low byte."""
    return ".".join(str(b) for b in int(addr).to_bytes(4, "little"))


def ipv4_from_str(text: str) -> int:
    """Parse dotted text into an address with its first octet in the low byte.

    Text with fewer than four dot-separated parts yields 0. Each part is read
    like a C integer prefix and truncated to one byte; parts past the fourth
    are ignored.
    """
    parts = text[:_IPV4_TEXT_LIMIT].split(".")
    if len(parts) < 4:
        return 0
    result = 0
    for index, part in enumerate(parts[:4]):
        result |= (_atoi(part) & 0xFF) << (8 * index)
    return result


def bt_to_str(addr: bytes, upper: bool = True) -> str:
    """Render a six-byte Bluetooth address as colon-separated hex."""
    raw = bytes(addr)
    if len(raw) != 6:
        raise ValueError(f"a Bluetooth address holds 6 bytes, got {len(raw)}")
    spec = "02X" if upper else "02x"
    return ":".join(format(b, spec) for b in raw)


def bt_from_str(text: str) -> bytes:
    """Parse six colon-separated decimal fields into a Bluetooth address.

    Fields are truncated to one byte; text that does not hold six fields
    yields an all-zero address.
    """
    match = _BT_SCAN.match(text)
    if match is None:
        return bytes(6)
    return bytes(int(field) & 0xFF for field in match.groups())