"""Core data models for the pooled lottery."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from pooled_lottery.blockchain.accounts import AccountId
from pooled_lottery.lottery.errors import ERRORS_BY_CODE, ErrorCode


@dataclass(frozen=True)
class Entered:
    """Emitted when an entry is accepted."""

    player: AccountId
    value: int

    def to_dict(self) -> dict:
        return {"player": self.player.hex(), "value": self.value}


@dataclass(frozen=True)
class Won:
    """Emitted when the pot has been paid to the winner."""

    winner: AccountId
    amount: int

    def to_dict(self) -> dict:
        return {"winner": self.winner.hex(), "amount": self.amount}


@dataclass(frozen=True)
class EventRecord:
    """A committed event together with the block it was included in."""

    event: Entered | Won
    block_number: int
    timestamp: int
    index: int

    @property
    def name(self) -> str:
        return type(self.event).__name__


@dataclass
class CallResult:
    """Outcome of a message dispatched through the host."""

    ok: bool
    value: Any = None
    error: Optional[ErrorCode] = None
    events: List[Entered | Won] = field(default_factory=list)

    def unwrap(self) -> Any:
        """Return the value, re-raising the contract error on failure."""
        if not self.ok:
            raise ERRORS_BY_CODE[self.error]()
        return self.value
