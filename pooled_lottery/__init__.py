"""Pooled pot lottery: a contract state machine and a local host to run it on."""

from pooled_lottery.blockchain.accounts import AccountId
from pooled_lottery.blockchain.chain import LocalChain
from pooled_lottery.lottery.contract import LotteryContract
from pooled_lottery.lottery.errors import ErrorCode, LotteryError
from pooled_lottery.lottery.models import CallResult, Entered, Won

__all__ = [
    "AccountId",
    "CallResult",
    "Entered",
    "ErrorCode",
    "LocalChain",
    "LotteryContract",
    "LotteryError",
    "Won",
]

__version__ = "0.1.0"
