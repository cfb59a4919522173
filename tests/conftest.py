import pytest

from pooled_lottery.blockchain.accounts import AccountId
from pooled_lottery.blockchain.chain import LocalChain

OPERATOR = AccountId(b"\x0a" * 32)
BOB = AccountId(b"\x0b" * 32)
CAROL = AccountId(b"\x0c" * 32)
DAVE = AccountId(b"\x0d" * 32)

STARTING_FUNDS = 1_000


@pytest.fixture
def chain():
    chain = LocalChain(genesis_timestamp_ms=1_700_000_000_000, block_time_ms=6000)
    for account in (OPERATOR, BOB, CAROL, DAVE):
        chain.fund(account, STARTING_FUNDS)
    return chain


@pytest.fixture
def lottery(chain):
    return chain.deploy(OPERATOR, False)


@pytest.fixture
def running_lottery(chain, lottery):
    assert chain.call(lottery, OPERATOR, "start_lottery").ok
    return lottery
