"""Packed BCD: two decimal digits per byte, tens in the high nibble."""

from __future__ import annotations

from emvpan.core.smartcard.errors import ProtocolError


def encode_bcd(value: int, width: int) -> bytes:
    """Encode *value* into exactly *width* bytes, zero-padded on the left."""
    if value < 0 or value > 100**width - 1:
        raise ValueError(f"{value} does not fit in {width} BCD bytes")
    buf = bytearray(width)
    for i in range(width - 1, -1, -1):
        value, pair = divmod(value, 100)
        buf[i] = (pair // 10) << 4 | pair % 10
    return bytes(buf)


def decode_bcd(data: bytes) -> int:
    """Decode packed BCD, most-significant byte first."""
    value = 0
    for b in data:
        hi, lo = b >> 4, b & 0x0F
        if hi > 9 or lo > 9:
            raise ProtocolError(f"invalid BCD byte {b:02X}")
        value = value * 100 + hi * 10 + lo
    return value
