import json

import pytest

from pooled_lottery.blockchain.chain import LocalChain
from pooled_lottery.blockchain.storage import ContractStorage, JsonStorageBackend, MemoryStorageBackend
from pooled_lottery.lottery.errors import StorageError

from conftest import BOB, CAROL, OPERATOR


def test_state_survives_restart(tmp_path):
    path = tmp_path / "lottery.json"
    chain = LocalChain()
    chain.fund(BOB, 100)
    chain.fund(CAROL, 100)
    address = chain.deploy(OPERATOR, True, storage_backend=JsonStorageBackend(path))
    chain.call(address, OPERATOR, "start_lottery")
    chain.call(address, CAROL, "enter", value=3)
    chain.call(address, BOB, "enter", value=7)

    restarted = LocalChain()
    restarted.attach(address, JsonStorageBackend(path))

    assert restarted.query(address, "owner") == OPERATOR
    assert restarted.query(address, "is_running") is True
    assert restarted.query(address, "get_players") == [CAROL, BOB]
    assert restarted.query(address, "get_balances", BOB) == 7


def test_failed_call_is_not_persisted():
    backend = MemoryStorageBackend()
    chain = LocalChain()
    address = chain.deploy(OPERATOR, False, storage_backend=backend)
    chain.call(address, BOB, "start_lottery")
    assert backend.load().running is False


def test_persisted_layout(tmp_path):
    path = tmp_path / "lottery.json"
    chain = LocalChain()
    chain.fund(BOB, 10)
    address = chain.deploy(OPERATOR, False, storage_backend=JsonStorageBackend(path))
    chain.call(address, OPERATOR, "start_lottery")
    chain.call(address, BOB, "enter", value=4)

    data = json.loads(path.read_text())
    assert data["owner"] == OPERATOR.hex()
    assert data["running"] is True
    assert data["players"] == [BOB.hex()]
    assert data["entries"] == {BOB.hex(): 4}
    assert "pot" not in data


def test_attach_without_saved_state():
    chain = LocalChain()
    with pytest.raises(StorageError):
        chain.attach(OPERATOR, MemoryStorageBackend())


def test_corrupt_file(tmp_path):
    path = tmp_path / "lottery.json"
    path.write_text("{not json")
    with pytest.raises(StorageError):
        JsonStorageBackend(path).load()


def test_inconsistent_layout():
    data = ContractStorage(value=False, owner=OPERATOR).to_dict()
    data["players"] = [BOB.hex()]
    with pytest.raises(StorageError):
        ContractStorage.from_dict(data)


def test_contracts_on_one_chain_keep_separate_files(tmp_path):
    config = {"storage": {"directory": str(tmp_path / "state")}}
    chain = LocalChain.from_config(config)
    chain.fund(BOB, 100)
    chain.fund(CAROL, 100)
    first = chain.deploy(OPERATOR, False)
    chain.call(first, OPERATOR, "start_lottery")
    chain.call(first, BOB, "enter", value=5)
    second = chain.deploy(CAROL, True)
    chain.call(second, CAROL, "start_lottery")
    chain.call(second, CAROL, "enter", value=9)

    assert len(list((tmp_path / "state").glob("*.json"))) == 2

    restarted = LocalChain.from_config(config)
    restored = restarted.attach(first)
    assert restored.storage.owner == OPERATOR
    assert restored.storage.ledger.players() == [BOB]
    assert restarted.attach(second).storage.ledger.players() == [CAROL]


def test_attach_without_any_backend():
    with pytest.raises(StorageError):
        LocalChain().attach(OPERATOR)
