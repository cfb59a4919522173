"""Errors raised by the lottery contract and by the local host."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Type


class ErrorCode(Enum):
    """Closed set of failures a lottery message can report."""

    LOTTERY_NOT_RUNNING = "LotteryNotRunning"
    CALLER_NOT_OWNER = "CallerNotOwner"
    NO_VALUE_SENT = "NoValueSent"
    ERR_TRANSFER = "ErrTransfer"
    PLAYER_ALREADY_IN_LOTTERY = "PlayerAlreadyInLottery"
    NO_ENTRIES = "NoEntries"


class LotteryError(Exception):
    """Base class for contract-level failures. Each subclass carries one ErrorCode."""

    code: ErrorCode

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code.value)


class LotteryNotRunning(LotteryError):
    code = ErrorCode.LOTTERY_NOT_RUNNING


class CallerNotOwner(LotteryError):
    code = ErrorCode.CALLER_NOT_OWNER


class NoValueSent(LotteryError):
    code = ErrorCode.NO_VALUE_SENT


class ErrTransfer(LotteryError):
    code = ErrorCode.ERR_TRANSFER


class PlayerAlreadyInLottery(LotteryError):
    code = ErrorCode.PLAYER_ALREADY_IN_LOTTERY


class NoEntries(LotteryError):
    code = ErrorCode.NO_ENTRIES


ERRORS_BY_CODE: Dict[ErrorCode, Type[LotteryError]] = {
    cls.code: cls
    for cls in (
        LotteryNotRunning,
        CallerNotOwner,
        NoValueSent,
        ErrTransfer,
        PlayerAlreadyInLottery,
        NoEntries,
    )
}


# ----------------------------------------------------------------------
# Host errors
# ----------------------------------------------------------------------
class ChainError(Exception):
    """Failure raised by the execution host rather than by contract logic."""


class TransferFailed(ChainError):
    """A value transfer was refused (funds, recipient rejection, minimum balance)."""


class InsufficientBalance(TransferFailed):
    pass


class NonPayableMessage(ChainError):
    pass


class UnknownMessage(ChainError):
    pass


class StorageError(ChainError):
    """Persisted contract state could not be read or is inconsistent."""
