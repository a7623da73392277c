# Per-key serialization for read-modify-write on a single post.
# Paired with SELECT ... FOR UPDATE in the services so concurrent reactions
# against the same post cannot lose updates.

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class KeyedLock:
    """One mutex per key, created on demand and dropped when no longer held or awaited"""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, List] = {}  # key -> [lock, waiters]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1

        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# Global instance for app-wide usage
post_locks = KeyedLock()
