import pytest
from web3 import Web3

from pooled_lottery.lottery import randomness

from conftest import BOB, CAROL, DAVE

TIMESTAMP = 1_700_000_060_000
BLOCK = 10


def test_xorshift_known_values():
    assert randomness.xorshift64(1) == 1_082_269_761
    # high bits shifted past 64 are dropped
    assert randomness.xorshift64(1 << 63) == (1 << 63) | (1 << 56)
    assert randomness.xorshift64(0) == 0


def test_xorshift_stays_within_64_bits():
    assert randomness.xorshift64(randomness.U64_MASK) <= randomness.U64_MASK


def test_seed_hashes_encoded_players_and_mixes_block():
    digest = Web3.keccak(b"\x04" + bytes(BOB))
    expected = int.from_bytes(bytes(digest[:8]), "big") ^ TIMESTAMP ^ BLOCK
    assert randomness.seed([BOB], TIMESTAMP, BLOCK) == expected


def test_seed_depends_on_entry_order():
    forward = randomness.seed([BOB, CAROL], TIMESTAMP, BLOCK)
    backward = randomness.seed([CAROL, BOB], TIMESTAMP, BLOCK)
    assert forward != backward


def test_random_value_is_deterministic():
    players = [BOB, CAROL, DAVE]
    first = randomness.random_value(players, TIMESTAMP, BLOCK)
    assert randomness.random_value(players, TIMESTAMP, BLOCK) == first
    assert randomness.random_value(players, TIMESTAMP, BLOCK + 1) != first


def test_winner_index_in_range():
    players = [BOB, CAROL, DAVE]
    for block in range(50):
        index = randomness.winner_index(players, TIMESTAMP + block * 6000, block)
        assert 0 <= index < len(players)


def test_single_player_index_is_zero():
    for block in range(10):
        assert randomness.winner_index([DAVE], TIMESTAMP, block) == 0


def test_empty_players_rejected():
    with pytest.raises(ValueError):
        randomness.winner_index([], TIMESTAMP, BLOCK)
