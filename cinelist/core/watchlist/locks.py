"""
Per-list mutual exclusion for watchlist mutations.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Generator, List


class ListLockRegistry:
    """
    Hands out one lock per watchlist id.

    Add, remove and reorder on the same list run one at a time within this
    process; mutations on different lists proceed in parallel. Cross-process
    exclusion comes from the row lock taken on the watchlist inside the
    transaction.

    A list's lock only exists while some thread holds or waits for it, so the
    registry stays as small as the number of lists being mutated right now.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # watchlist_id -> [lock, number of holders and waiters]
        self._locks: Dict[int, List] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, watchlist_id: int) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(watchlist_id)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[watchlist_id] = entry
            entry[1] += 1
            return entry[0]

    def _checkin(self, watchlist_id: int) -> None:
        with self._guard:
            entry = self._locks[watchlist_id]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[watchlist_id]

    def is_held(self, watchlist_id: int) -> bool:
        with self._guard:
            entry = self._locks.get(watchlist_id)
            return entry is not None and entry[0].locked()

    @contextmanager
    def hold(self, watchlist_id: int) -> Generator[None, None, None]:
        """Hold the lock of ``watchlist_id`` for the duration of the block."""
        lock = self._checkout(watchlist_id)
        try:
            with lock:
                yield
        finally:
            self._checkin(watchlist_id)
