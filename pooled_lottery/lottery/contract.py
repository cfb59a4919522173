"""
Lottery contract - running flag, operator checks and the enter/draw sequence
"""

from __future__ import annotations

from typing import List, Optional

from pooled_lottery.blockchain.accounts import AccountId
from pooled_lottery.blockchain.env import ExecutionContext
from pooled_lottery.blockchain.storage import ContractStorage
from pooled_lottery.lottery.errors import (
    CallerNotOwner,
    LotteryNotRunning,
    NoValueSent,
    PlayerAlreadyInLottery,
)
from pooled_lottery.lottery.models import Entered
from pooled_lottery.lottery.payout import PayoutCoordinator
from pooled_lottery.utils.logger import get_logger

logger = get_logger(__name__)

MIN_ENTRY_VALUE = 1


def message(*, payable: bool = False, mutates: bool = True):
    """Mark a method as a callable contract message."""

    def decorate(func):
        func.is_message = True
        func.payable = payable
        func.mutates = mutates
        return func

    return decorate


class LotteryContract:
    """Pot lottery state machine.

    All state lives in `self.storage` so the host can snapshot and restore it
    around a call. Failing checks raise before anything is written.
    """

    def __init__(self, storage: ContractStorage):
        self.storage = storage

    @classmethod
    def new(cls, ctx: ExecutionContext, init_value: bool) -> "LotteryContract":
        """Constructor: the caller becomes the operator, entries start closed."""
        storage = ContractStorage(value=init_value, owner=ctx.caller(), running=False)
        logger.info(f"Lottery instantiated at {ctx.account_id().short()} with operator {storage.owner.short()}")
        return cls(storage)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @message(mutates=False)
    def owner(self, ctx: ExecutionContext) -> AccountId:
        return self.storage.owner

    @message(mutates=False)
    def pot(self, ctx: ExecutionContext) -> int:
        return ctx.balance()

    @message(mutates=False)
    def is_running(self, ctx: ExecutionContext) -> bool:
        return self.storage.running

    @message(mutates=False)
    def get_players(self, ctx: ExecutionContext) -> List[AccountId]:
        return self.storage.ledger.players()

    @message(mutates=False)
    def get_balances(self, ctx: ExecutionContext, player: AccountId) -> Optional[int]:
        return self.storage.ledger.stake_of(player)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    @message(payable=True)
    def enter(self, ctx: ExecutionContext) -> None:
        if not self.storage.running:
            raise LotteryNotRunning()

        caller = ctx.caller()
        if caller in self.storage.ledger:
            raise PlayerAlreadyInLottery()

        value = ctx.transferred_value()
        if value < MIN_ENTRY_VALUE:
            raise NoValueSent()

        self.storage.ledger.record(caller, value)
        ctx.emit_event(Entered(player=caller, value=value))
        logger.info(f"Entry accepted: {caller.short()} staked {value} ({len(self.storage.ledger)} players)")

    @message()
    def pick_winner(self, ctx: ExecutionContext) -> None:
        # Open to any caller; the running flag is left as is after payout
        PayoutCoordinator(self.storage.ledger).draw(ctx)

    @message()
    def start_lottery(self, ctx: ExecutionContext) -> None:
        self._ensure_owner(ctx)
        self.storage.running = True
        logger.info("Lottery started")

    @message()
    def stop_lottery(self, ctx: ExecutionContext) -> None:
        self._ensure_owner(ctx)
        self.storage.running = False
        logger.info("Lottery stopped")

    def _ensure_owner(self, ctx: ExecutionContext) -> None:
        if ctx.caller() != self.storage.owner:
            raise CallerNotOwner()
