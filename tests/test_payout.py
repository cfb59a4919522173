import pytest

from pooled_lottery.blockchain.env import ExecutionContext
from pooled_lottery.lottery import randomness
from pooled_lottery.lottery.errors import ErrTransfer, NoEntries, TransferFailed
from pooled_lottery.lottery.ledger import EntryLedger
from pooled_lottery.lottery.models import Won
from pooled_lottery.lottery.payout import PayoutCoordinator

from conftest import BOB, CAROL, DAVE, OPERATOR


class FakeContext(ExecutionContext):
    """Deterministic stand-in for the host; records transfers and events."""

    def __init__(self, *, balance=0, block_number=42, block_timestamp=1_700_000_252_000, fail_transfers=False):
        self._balance = balance
        self._block_number = block_number
        self._block_timestamp = block_timestamp
        self.fail_transfers = fail_transfers
        self.transfers = []
        self.events = []

    def caller(self):
        return OPERATOR

    def account_id(self):
        return OPERATOR

    def transferred_value(self):
        return 0

    def balance(self):
        return self._balance

    def block_timestamp(self):
        return self._block_timestamp

    def block_number(self):
        return self._block_number

    def transfer(self, dest, amount):
        if self.fail_transfers:
            raise TransferFailed("recipient refused")
        self.transfers.append((dest, amount))
        self._balance -= amount

    def emit_event(self, event):
        self.events.append(event)


def filled_ledger():
    ledger = EntryLedger()
    for player, stake in ((BOB, 10), (CAROL, 20), (DAVE, 30)):
        ledger.record(player, stake)
    return ledger


def test_empty_ledger_raises_no_entries():
    ctx = FakeContext(balance=50)
    with pytest.raises(NoEntries):
        PayoutCoordinator(EntryLedger()).draw(ctx)
    assert ctx.transfers == []
    assert ctx.events == []


def test_pays_whole_balance_to_drawn_player():
    ledger = filled_ledger()
    players = ledger.players()
    ctx = FakeContext(balance=75)
    expected = players[randomness.winner_index(players, ctx.block_timestamp(), ctx.block_number())]

    won = PayoutCoordinator(ledger).draw(ctx)

    assert won == Won(winner=expected, amount=75)
    assert ctx.transfers == [(expected, 75)]
    assert ctx.events == [won]
    assert len(ledger) == 0


def test_refused_transfer_leaves_ledger_intact():
    ledger = filled_ledger()
    before = ledger.to_dict()
    ctx = FakeContext(balance=60, fail_transfers=True)

    with pytest.raises(ErrTransfer):
        PayoutCoordinator(ledger).draw(ctx)

    assert ledger.to_dict() == before
    assert ctx.events == []
