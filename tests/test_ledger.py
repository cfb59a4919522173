import pytest

from pooled_lottery.lottery.ledger import EntryLedger

from conftest import BOB, CAROL, DAVE


def test_record_keeps_order_and_stakes():
    ledger = EntryLedger()
    ledger.record(CAROL, 5)
    ledger.record(BOB, 9)
    assert ledger.players() == [CAROL, BOB]
    assert ledger.stake_of(BOB) == 9
    assert ledger.stake_of(DAVE) is None
    assert BOB in ledger and DAVE not in ledger
    assert len(ledger) == 2
    assert ledger.total_staked() == 14


def test_duplicate_record_rejected():
    ledger = EntryLedger()
    ledger.record(BOB, 1)
    with pytest.raises(ValueError):
        ledger.record(BOB, 2)
    assert ledger.stake_of(BOB) == 1
    assert len(ledger) == 1


def test_clear_removes_everything():
    ledger = EntryLedger()
    for player in (BOB, CAROL, DAVE):
        ledger.record(player, 3)
    ledger.clear()
    assert len(ledger) == 0
    assert ledger.players() == []
    assert all(ledger.stake_of(p) is None for p in (BOB, CAROL, DAVE))


def test_dict_layout_roundtrip():
    ledger = EntryLedger()
    ledger.record(DAVE, 4)
    ledger.record(BOB, 8)
    assert EntryLedger.from_dict(ledger.to_dict()) == ledger


def test_from_dict_rejects_mismatched_layout():
    data = {"players": [BOB.hex()], "entries": {CAROL.hex(): 1}}
    with pytest.raises(ValueError):
        EntryLedger.from_dict(data)

    duplicated = {"players": [BOB.hex(), BOB.hex()], "entries": {BOB.hex(): 1}}
    with pytest.raises(ValueError):
        EntryLedger.from_dict(duplicated)
