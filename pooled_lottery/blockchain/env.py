"""Execution context handed to every contract message."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pooled_lottery.blockchain.accounts import AccountId


class ExecutionContext(ABC):
    """What the host exposes to a running message.

    `transfer` raises TransferFailed when the host refuses the transfer.
    """

    @abstractmethod
    def caller(self) -> AccountId: ...

    @abstractmethod
    def account_id(self) -> AccountId: ...

    @abstractmethod
    def transferred_value(self) -> int: ...

    @abstractmethod
    def balance(self) -> int: ...

    @abstractmethod
    def block_timestamp(self) -> int: ...

    @abstractmethod
    def block_number(self) -> int: ...

    @abstractmethod
    def transfer(self, dest: AccountId, amount: int) -> None: ...

    @abstractmethod
    def emit_event(self, event: object) -> None: ...
