"""Contract storage layout and the backends that persist it between calls."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pooled_lottery.blockchain.accounts import AccountId
from pooled_lottery.lottery.errors import StorageError
from pooled_lottery.lottery.ledger import EntryLedger
from pooled_lottery.utils.logger import get_logger

logger = get_logger(__name__)

STORAGE_VERSION = 1


@dataclass
class ContractStorage:
    """Everything the lottery keeps between calls. The pot is not stored."""

    value: bool
    owner: AccountId
    running: bool = False
    ledger: EntryLedger = field(default_factory=EntryLedger)

    def snapshot(self) -> "ContractStorage":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "version": STORAGE_VERSION,
            "value": self.value,
            "owner": self.owner.hex(),
            "running": self.running,
            **self.ledger.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ContractStorage":
        try:
            return cls(
                value=bool(data["value"]),
                owner=AccountId.from_hex(data["owner"]),
                running=bool(data["running"]),
                ledger=EntryLedger.from_dict(data),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"invalid contract storage: {exc}") from exc


class MemoryStorageBackend:
    """Keeps the last saved layout in memory."""

    def __init__(self) -> None:
        self._data: Optional[dict] = None

    def load(self) -> Optional[ContractStorage]:
        if self._data is None:
            return None
        return ContractStorage.from_dict(self._data)

    def save(self, storage: ContractStorage) -> None:
        self._data = storage.to_dict()


class JsonStorageBackend:
    """Persists the layout as a JSON document, replaced atomically on save."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Optional[ContractStorage]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"cannot read {self.path}: {exc}") from exc
        storage = ContractStorage.from_dict(data)
        logger.info(f"Loaded contract storage from {self.path} ({len(storage.ledger)} players)")
        return storage

    def save(self, storage: ContractStorage) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, 'w') as f:
            json.dump(storage.to_dict(), f, indent=2)
        tmp_path.replace(self.path)
        logger.debug(f"Contract storage saved to {self.path}")
