"""
Entry Ledger - ordered participants plus the stake each of them put in
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from pooled_lottery.blockchain.accounts import AccountId


class EntryLedger:
    """Participant sequence and identity→stake mapping kept in lockstep.

    The sequence preserves entry order and is the index space for the draw.
    The mapping answers "has this identity already entered". Both always hold
    the same set of identities.
    """

    def __init__(self) -> None:
        self._players: List[AccountId] = []
        self._entries: Dict[AccountId, int] = {}

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[AccountId]:
        return iter(list(self._players))

    def __contains__(self, player: AccountId) -> bool:
        return player in self._entries

    def stake_of(self, player: AccountId) -> Optional[int]:
        return self._entries.get(player)

    def players(self) -> List[AccountId]:
        """Snapshot copy of the participant sequence."""
        return list(self._players)

    def player_at(self, index: int) -> AccountId:
        return self._players[index]

    def total_staked(self) -> int:
        return sum(self._entries.values())

    def record(self, player: AccountId, value: int) -> None:
        if player in self._entries:
            raise ValueError(f"{player!r} already has an entry")
        self._players.append(player)
        self._entries[player] = value

    def clear(self) -> None:
        for player in self._players:
            self._entries.pop(player, None)
        self._players = []

    def to_dict(self) -> dict:
        return {
            "players": [p.hex() for p in self._players],
            "entries": {p.hex(): stake for p, stake in self._entries.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EntryLedger":
        ledger = cls()
        players = [AccountId.from_hex(p) for p in data.get("players", [])]
        entries = {AccountId.from_hex(k): int(v) for k, v in data.get("entries", {}).items()}
        if len(set(players)) != len(players) or set(players) != set(entries):
            raise ValueError("players and entries disagree")
        for player in players:
            ledger.record(player, entries[player])
        return ledger

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntryLedger):
            return NotImplemented
        return self._players == other._players and self._entries == other._entries

    def __repr__(self) -> str:
        return f"EntryLedger(players={len(self._players)}, staked={self.total_staked()})"
