"""Account identities used by the lottery host and contract."""

from __future__ import annotations

import hashlib
from functools import total_ordering

import base58
from web3 import Web3

ACCOUNT_ID_LENGTH = 32
SS58_PREFIX = b"SS58PRE"
SS58_CHECKSUM_LENGTH = 2
DEFAULT_SS58_FORMAT = 42

# EVM-compatible runtimes map a 20-byte address into the 32-byte space with this suffix
H160_PADDING = b"\xee" * 12


def _ss58_checksum(payload: bytes) -> bytes:
    return hashlib.blake2b(SS58_PREFIX + payload, digest_size=64).digest()[:SS58_CHECKSUM_LENGTH]


def _encode_ss58_prefix(ss58_format: int) -> bytes:
    if 0 <= ss58_format < 64:
        return bytes([ss58_format])
    if 64 <= ss58_format < 16384:
        first = ((ss58_format & 0b1111_1100) >> 2) | 0b0100_0000
        second = (ss58_format >> 8) | ((ss58_format & 0b11) << 6)
        return bytes([first, second])
    raise ValueError(f"SS58 format out of range: {ss58_format}")


@total_ordering
class AccountId:
    """Immutable 32-byte account identity."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes):
        raw = bytes(raw)
        if len(raw) != ACCOUNT_ID_LENGTH:
            raise ValueError(f"AccountId must be {ACCOUNT_ID_LENGTH} bytes, got {len(raw)}")
        self._raw = raw

    @classmethod
    def from_hex(cls, value: str) -> "AccountId":
        text = value[2:] if value.lower().startswith("0x") else value
        return cls(bytes.fromhex(text))

    @classmethod
    def from_h160(cls, address: str) -> "AccountId":
        """Map an Ethereum-style address into the 32-byte account space."""
        checksummed = Web3.to_checksum_address(address)
        return cls(bytes.fromhex(checksummed[2:]) + H160_PADDING)

    @classmethod
    def from_ss58(cls, address: str) -> "AccountId":
        data = base58.b58decode(address)
        if not data:
            raise ValueError("empty SS58 address")
        prefix_len = 2 if data[0] & 0b0100_0000 else 1
        expected = prefix_len + ACCOUNT_ID_LENGTH + SS58_CHECKSUM_LENGTH
        if len(data) != expected:
            raise ValueError(f"SS58 address has unexpected length {len(data)}")
        payload, checksum = data[:-SS58_CHECKSUM_LENGTH], data[-SS58_CHECKSUM_LENGTH:]
        if _ss58_checksum(payload) != checksum:
            raise ValueError("SS58 checksum mismatch")
        return cls(payload[prefix_len:])

    def to_ss58(self, ss58_format: int = DEFAULT_SS58_FORMAT) -> str:
        payload = _encode_ss58_prefix(ss58_format) + self._raw
        return base58.b58encode(payload + _ss58_checksum(payload)).decode("ascii")

    def to_h160(self) -> str | None:
        """Return the checksummed Ethereum address when this id came from one."""
        if not self._raw.endswith(H160_PADDING):
            return None
        return Web3.to_checksum_address("0x" + self._raw[:20].hex())

    def hex(self) -> str:
        return "0x" + self._raw.hex()

    def short(self) -> str:
        """Display form: first three and last two bytes, e.g. '0x123456...abcd'."""
        return f"0x{self._raw[:3].hex()}...{self._raw[-2:].hex()}"

    def __bytes__(self) -> bytes:
        return self._raw

    def __reduce__(self):
        return (AccountId, (self._raw,))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccountId):
            return NotImplemented
        return self._raw == other._raw

    def __lt__(self, other: "AccountId") -> bool:
        if not isinstance(other, AccountId):
            return NotImplemented
        return self._raw < other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __repr__(self) -> str:
        return f"AccountId({self.short()})"

    def __str__(self) -> str:
        return self.hex()


def derive_account(*parts: bytes) -> AccountId:
    """Derive a deterministic account id from arbitrary seed material."""
    return AccountId(bytes(Web3.keccak(b"".join(parts))))
