"""Per-key locks serializing writes against the same order, wallet or tracking.

Ledger and tracking operations are read-check-write sequences. Holding the
lock for every key an operation touches (``order:<id>``, ``wallet:<user_id>``)
turns each sequence into one serialized unit inside this process. Keys are
always acquired in sorted order, so two operations sharing keys cannot
deadlock. Locks are re-entrant for the owning thread. A key is forgotten once
its last holder or waiter releases it.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

logger = structlog.get_logger(__name__)


class _KeyLock:
    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.RLock()
        self.holders = 0


class KeyedLocks:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, _KeyLock] = {}

    def _checkout(self, key: str) -> threading.RLock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.holders += 1
            return entry.lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            entry = self._locks[key]
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        """Acquire the locks for all ``keys`` (duplicates and ``None`` ignored)."""
        ordered = sorted({key for key in keys if key})
        acquired = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                lock.acquire()
                acquired.append((key, lock))
            logger.debug("Locks acquired", keys=ordered)
            yield
        finally:
            for key, lock in reversed(acquired):
                lock.release()
                self._checkin(key)


def order_key(order_id) -> str:
    return f"order:{order_id}"


def wallet_key(user_id) -> str:
    return f"wallet:{user_id}"


def tracking_key(tracking_id) -> str:
    return f"tracking:{tracking_id}"


def tracking_order_key(order_id) -> str:
    return f"tracking-order:{order_id}"


def tracking_number_key(tracking_number) -> str:
    return f"tracking-number:{tracking_number}"
