"""
Payout & Reset - pays the pot to the drawn entry, then clears the ledger
"""

from __future__ import annotations

from pooled_lottery.blockchain.env import ExecutionContext
from pooled_lottery.lottery import randomness
from pooled_lottery.lottery.errors import ErrTransfer, NoEntries, TransferFailed
from pooled_lottery.lottery.ledger import EntryLedger
from pooled_lottery.lottery.models import Won
from pooled_lottery.utils.logger import get_logger

logger = get_logger(__name__)


class PayoutCoordinator:
    """Runs a draw against an EntryLedger.

    The transfer happens before any ledger mutation, so a refused transfer
    leaves every entry in place and the draw can simply be retried.
    """

    def __init__(self, ledger: EntryLedger):
        self._ledger = ledger

    def draw(self, ctx: ExecutionContext) -> Won:
        if len(self._ledger) == 0:
            raise NoEntries()

        players = self._ledger.players()
        index = randomness.winner_index(players, ctx.block_timestamp(), ctx.block_number())
        winner = players[index]
        amount = ctx.balance()

        logger.info(
            f"Draw at block {ctx.block_number()}: index {index} of {len(players)}, "
            f"winner {winner.short()}, pot {amount}"
        )

        try:
            ctx.transfer(winner, amount)
        except TransferFailed as exc:
            logger.warning(f"Payout of {amount} to {winner.short()} failed: {exc}")
            raise ErrTransfer(str(exc)) from exc

        self._ledger.clear()
        event = Won(winner=winner, amount=amount)
        ctx.emit_event(event)
        return event
