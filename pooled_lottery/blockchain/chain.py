"""Local chain - deterministic in-process host for the lottery contract."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from pooled_lottery.blockchain.accounts import AccountId, derive_account
from pooled_lottery.blockchain.env import ExecutionContext
from pooled_lottery.blockchain.storage import JsonStorageBackend, MemoryStorageBackend
from pooled_lottery.lottery.contract import LotteryContract
from pooled_lottery.lottery.errors import (
    ChainError,
    InsufficientBalance,
    LotteryError,
    NonPayableMessage,
    StorageError,
    TransferFailed,
    UnknownMessage,
)
from pooled_lottery.lottery.event_manager import EventLog
from pooled_lottery.lottery.models import CallResult
from pooled_lottery.utils.config import get_config_value
from pooled_lottery.utils.logger import get_logger

logger = get_logger(__name__)

QUERY_CALLER = AccountId(b"\x00" * 32)

StorageBackend = JsonStorageBackend | MemoryStorageBackend


class _CallContext(ExecutionContext):
    """Context for one message; events are buffered until the call commits."""

    def __init__(self, chain: "LocalChain", address: AccountId, caller: AccountId, value: int):
        self._chain = chain
        self._address = address
        self._caller = caller
        self._value = value
        self.events: List[object] = []

    def caller(self) -> AccountId:
        return self._caller

    def account_id(self) -> AccountId:
        return self._address

    def transferred_value(self) -> int:
        return self._value

    def balance(self) -> int:
        return self._chain.balance_of(self._address)

    def block_timestamp(self) -> int:
        return self._chain.block_timestamp

    def block_number(self) -> int:
        return self._chain.block_number

    def transfer(self, dest: AccountId, amount: int) -> None:
        self._chain._move(self._address, dest, amount)

    def emit_event(self, event: object) -> None:
        self.events.append(event)


class LocalChain:
    """Balances, blocks and transactional message dispatch.

    Every `call` either commits all of its effects (balances, contract
    storage, events) or none of them.
    """

    def __init__(
        self,
        *,
        genesis_timestamp_ms: int = 1_700_000_000_000,
        block_time_ms: int = 6000,
        minimum_balance: int = 0,
        event_log: Optional[EventLog] = None,
        storage_dir: Optional[str | Path] = None,
        default_init_value: bool = False,
    ):
        self.block_number = 0
        self.block_timestamp = genesis_timestamp_ms
        self.block_time_ms = block_time_ms
        self.minimum_balance = minimum_balance
        self.events = event_log or EventLog()
        self.storage_dir = Path(storage_dir) if storage_dir else None
        self.default_init_value = default_init_value

        self._balances: Dict[AccountId, int] = {}
        self._rejecting: Set[AccountId] = set()
        self._contracts: Dict[AccountId, LotteryContract] = {}
        self._backends: Dict[AccountId, StorageBackend] = {}
        self._nonce = 0

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "LocalChain":
        storage_dir = str(get_config_value(config, "storage.directory", "") or "")
        return cls(
            genesis_timestamp_ms=int(get_config_value(config, "chain.genesis_timestamp_ms", 1_700_000_000_000)),
            block_time_ms=int(get_config_value(config, "chain.block_time_ms", 6000)),
            minimum_balance=int(get_config_value(config, "chain.minimum_balance", 0)),
            event_log=EventLog(capacity=int(get_config_value(config, "events.capacity", 1000))),
            storage_dir=storage_dir or None,
            default_init_value=bool(get_config_value(config, "lottery.init_value", False)),
        )

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------
    def advance_block(self, count: int = 1) -> int:
        if count < 1:
            raise ValueError("count must be positive")
        self.block_number += count
        self.block_timestamp += count * self.block_time_ms
        logger.debug(f"Advanced to block {self.block_number} (timestamp {self.block_timestamp})")
        return self.block_number

    # ------------------------------------------------------------------
    # Balances
    # ------------------------------------------------------------------
    def fund(self, account: AccountId, amount: int) -> None:
        """Mint value into an account."""
        if amount < 0:
            raise ValueError("amount must be non-negative")
        self._balances[account] = self._balances.get(account, 0) + amount

    def balance_of(self, account: AccountId) -> int:
        return self._balances.get(account, 0)

    def transfer_value(self, src: AccountId, dest: AccountId, amount: int) -> None:
        """Plain transfer outside of any contract message."""
        self._move(src, dest, amount)

    def reject_transfers_to(self, account: AccountId, reject: bool = True) -> None:
        """Make transfers into `account` fail, e.g. a recipient that refuses value."""
        if reject:
            self._rejecting.add(account)
        else:
            self._rejecting.discard(account)

    def _move(self, src: AccountId, dest: AccountId, amount: int) -> None:
        if amount < 0:
            raise ValueError("amount must be non-negative")
        available = self.balance_of(src)
        if available < amount:
            raise InsufficientBalance(f"{src.short()} has {available}, needs {amount}")
        if dest in self._rejecting:
            raise TransferFailed(f"{dest.short()} rejected the transfer")
        if self.balance_of(dest) + amount < self.minimum_balance:
            raise TransferFailed(f"transfer would leave {dest.short()} below the minimum balance")
        self._balances[src] = available - amount
        self._balances[dest] = self.balance_of(dest) + amount

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------
    def deploy(
        self,
        caller: AccountId,
        init_value: Optional[bool] = None,
        *,
        endowment: int = 0,
        storage_backend: Optional[StorageBackend] = None,
    ) -> AccountId:
        """Instantiate a lottery; `caller` becomes its operator.

        Without an explicit backend the storage goes to its own file under
        `storage_dir`, one file per contract address.
        """
        if init_value is None:
            init_value = self.default_init_value
        self._nonce += 1
        address = derive_account(b"pooled-lottery", bytes(caller), self._nonce.to_bytes(8, "big"))
        balances_before = dict(self._balances)
        ctx = _CallContext(self, address, caller, endowment)
        try:
            if endowment:
                self._move(caller, address, endowment)
            contract = LotteryContract.new(ctx, init_value)
        except Exception:
            self._balances = balances_before
            raise

        self._contracts[address] = contract
        backend = storage_backend or self._default_backend_for(address)
        if backend is not None:
            self._backends[address] = backend
            backend.save(contract.storage)
        logger.info(f"Deployed lottery {address.short()} by {caller.short()}")
        return address

    def _default_backend_for(self, address: AccountId) -> Optional[JsonStorageBackend]:
        if self.storage_dir is None:
            return None
        return JsonStorageBackend(self.storage_dir / f"{address.hex()[2:]}.json")

    def attach(self, address: AccountId, storage_backend: Optional[StorageBackend] = None) -> LotteryContract:
        """Re-create a contract at `address` from previously persisted storage."""
        storage_backend = storage_backend or self._default_backend_for(address)
        if storage_backend is None:
            raise StorageError("no storage backend configured to attach from")
        storage = storage_backend.load()
        if storage is None:
            raise StorageError("no persisted contract storage to attach")
        contract = LotteryContract(storage)
        self._contracts[address] = contract
        self._backends[address] = storage_backend
        logger.info(f"Attached lottery {address.short()} from persisted storage")
        return contract

    def contract(self, address: AccountId) -> LotteryContract:
        try:
            return self._contracts[address]
        except KeyError:
            raise ChainError(f"no contract at {address.short()}") from None

    def _handler(self, contract: LotteryContract, message: str):
        handler = getattr(contract, message, None)
        if handler is None or not getattr(handler, "is_message", False):
            raise UnknownMessage(f"unknown message '{message}'")
        return handler

    def call(self, address: AccountId, caller: AccountId, message: str, *args: Any, value: int = 0) -> CallResult:
        """Dispatch a message as one atomic transaction."""
        contract = self.contract(address)
        handler = self._handler(contract, message)
        if value and not handler.payable:
            raise NonPayableMessage(f"'{message}' does not accept value")

        balances_before = dict(self._balances)
        storage_before = contract.storage.snapshot()
        ctx = _CallContext(self, address, caller, value)
        try:
            if value:
                self._move(caller, address, value)
            result = handler(ctx, *args)
        except LotteryError as exc:
            self._balances = balances_before
            contract.storage = storage_before
            logger.info(f"{message} from {caller.short()} reverted: {exc.code.value}")
            return CallResult(ok=False, error=exc.code)
        except Exception:
            self._balances = balances_before
            contract.storage = storage_before
            raise

        self.events.commit(ctx.events, block_number=self.block_number, timestamp=self.block_timestamp)
        backend = self._backends.get(address)
        if backend is not None and handler.mutates:
            backend.save(contract.storage)
        return CallResult(ok=True, value=result, events=list(ctx.events))

    def query(self, address: AccountId, message: str, *args: Any, caller: AccountId = QUERY_CALLER) -> Any:
        """Run a read-only message and return its value directly."""
        contract = self.contract(address)
        handler = self._handler(contract, message)
        if handler.mutates:
            raise UnknownMessage(f"'{message}' is not a read-only message")
        return handler(_CallContext(self, address, caller, 0), *args)
