"""
Base64 VLQ as used by source map revision 3.

Each base64 digit carries 5 data bits; bit 6 (32) marks a continuation.
The lowest data bit of the first digit is the sign.
"""
from __future__ import annotations

from errors import MapDecodeError

_B64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_B64_VALUES = {c: i for i, c in enumerate(_B64)}

_SHIFT = 5
_CONTINUATION = 1 << _SHIFT
_MASK = _CONTINUATION - 1


def decode_segment(segment: str) -> list[int]:
    """Decodes one comma-separated segment into its signed values."""
    values: list[int] = []
    value = shift = 0
    for char in segment:
        digit = _B64_VALUES.get(char)
        if digit is None:
            raise MapDecodeError(f"Invalid base64 character {char!r} in mappings")
        value += (digit & _MASK) << shift
        if digit & _CONTINUATION:
            shift += _SHIFT
            continue
        values.append(-(value >> 1) if value & 1 else value >> 1)
        value = shift = 0
    if shift:
        raise MapDecodeError(f"Truncated VLQ value in segment {segment!r}")
    return values


def encode_values(values: list[int]) -> str:
    """Inverse of decode_segment; handy for building maps in tests and tools."""
    out = []
    for v in values:
        v = (-v << 1) | 1 if v < 0 else v << 1
        while True:
            digit = v & _MASK
            v >>= _SHIFT
            if v:
                digit |= _CONTINUATION
            out.append(_B64[digit])
            if not v:
                break
    return "".join(out)
