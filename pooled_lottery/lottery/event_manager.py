"""In-memory log of committed contract events."""

from __future__ import annotations

from collections import defaultdict, deque
from threading import Lock
from typing import Callable, Dict, Iterable, List, Optional

from pooled_lottery.lottery.models import EventRecord
from pooled_lottery.utils.logger import get_logger

logger = get_logger(__name__)


class EventLog:
    """Bounded, append-only store of events plus listener fan-out."""

    def __init__(self, *, capacity: int = 1000) -> None:
        self._lock = Lock()
        self._listeners: Dict[str, List[Callable[[EventRecord], None]]] = defaultdict(list)
        self._capacity = capacity
        self._records: deque[EventRecord] = deque(maxlen=capacity)
        self._next_index = 0

    # ------------------------------------------------------------------
    # Listener management
    # ------------------------------------------------------------------
    def add_listener(self, event_type: str, callback: Callable[[EventRecord], None]) -> None:
        """Register for an event name ("Entered", "Won") or "*" for all."""
        with self._lock:
            self._listeners[event_type].append(callback)
            logger.debug(f"[EventLog] Adding listener for event_type={event_type}, callback={callback}")

    def _emit(self, record: EventRecord) -> None:
        listeners = list(self._listeners.get(record.name, [])) + list(self._listeners.get("*", []))
        for callback in listeners:
            try:
                callback(record)
            except Exception as exc:
                logger.error("Listener for %s failed: %s", record.name, exc)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def commit(self, events: Iterable[object], *, block_number: int, timestamp: int) -> List[EventRecord]:
        """Append the events of one successful call, in emission order."""
        records = []
        with self._lock:
            for event in events:
                record = EventRecord(
                    event=event,
                    block_number=block_number,
                    timestamp=timestamp,
                    index=self._next_index,
                )
                self._next_index += 1
                self._records.append(record)
                records.append(record)

        for record in records:
            logger.info(f"[EventLog] {record.name} at block {block_number}: {record.event.to_dict()}")
            self._emit(record)
        return records

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def get_events(self, limit: Optional[int] = None, event_type: Optional[str] = None) -> List[EventRecord]:
        with self._lock:
            items = list(self._records)
        if event_type is not None:
            items = [r for r in items if r.name == event_type]
        if limit is not None:
            return items[-limit:]
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def set_capacity(self, capacity: int) -> None:
        """Resize the log (max records), keeping the most recent ones."""
        with self._lock:
            if capacity == self._capacity:
                return
            old_items = list(self._records)
            self._records = deque(old_items[-capacity:], maxlen=capacity)
            self._capacity = capacity
        logger.info(f"[EventLog] capacity set to {capacity}")

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
        logger.debug("[EventLog] cleared")
