"""Minimal SCALE encoding helpers.

Only the pieces needed to reproduce the byte string hashed by the draw:
compact integers and a vector of 32-byte account ids.
"""

from __future__ import annotations

from typing import Iterable

SINGLE_BYTE_MAX = (1 << 6) - 1
TWO_BYTE_MAX = (1 << 14) - 1
FOUR_BYTE_MAX = (1 << 30) - 1


def encode_compact(value: int) -> bytes:
    """Encode a non-negative integer in SCALE compact form."""
    if value < 0:
        raise ValueError(f"compact encoding requires a non-negative integer, got {value}")

    if value <= SINGLE_BYTE_MAX:
        return bytes([value << 2])
    if value <= TWO_BYTE_MAX:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value <= FOUR_BYTE_MAX:
        return ((value << 2) | 0b10).to_bytes(4, "little")

    # Big-integer mode: upper six bits carry (byte_length - 4)
    length = (value.bit_length() + 7) // 8
    if length > 67:
        raise ValueError("value too large for compact encoding")
    return bytes([((length - 4) << 2) | 0b11]) + value.to_bytes(length, "little")


def encode_account_vec(account_ids: Iterable[bytes]) -> bytes:
    """Encode a sequence of 32-byte ids as a SCALE `Vec<AccountId>`."""
    items = [bytes(item) for item in account_ids]
    for item in items:
        if len(item) != 32:
            raise ValueError(f"account id must be 32 bytes, got {len(item)}")
    return encode_compact(len(items)) + b"".join(items)
