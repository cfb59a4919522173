"""
Draw randomness derived from the participant list and the current block.

WARNING: every input here is public. Anyone who can see the entries and
predict or influence block height/time can predict or bias the draw. This is
only suitable for low-stakes draws where that is acceptable.
"""

from __future__ import annotations

from typing import Sequence

from web3 import Web3

from pooled_lottery.blockchain.accounts import AccountId
from pooled_lottery.utils.scale import encode_account_vec

U64_MASK = (1 << 64) - 1


def seed(players: Sequence[AccountId], block_timestamp: int, block_number: int) -> int:
    """keccak256 of the SCALE-encoded players, first 8 bytes big-endian, mixed with the block."""
    digest = Web3.keccak(encode_account_vec(bytes(p) for p in players))
    head = int.from_bytes(bytes(digest[:8]), "big")
    return (head ^ (block_timestamp & U64_MASK) ^ (block_number & U64_MASK)) & U64_MASK


def xorshift64(x: int) -> int:
    x &= U64_MASK
    x ^= (x << 13) & U64_MASK
    x ^= x >> 7
    x ^= (x << 17) & U64_MASK
    return x


def random_value(players: Sequence[AccountId], block_timestamp: int, block_number: int) -> int:
    return xorshift64(seed(players, block_timestamp, block_number))


def winner_index(players: Sequence[AccountId], block_timestamp: int, block_number: int) -> int:
    """Index into `players` of the winning entry."""
    if not players:
        raise ValueError("cannot pick an index from an empty participant list")
    return random_value(players, block_timestamp, block_number) % len(players)
