"""Per-resource mutual exclusion for reservation writes within one process."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional


class ResourceLocks:
    """Hands out one lock per resource ID, dropping it when nobody holds or waits on it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[str, List] = {}  # resource_id -> [lock, holders]

    @contextmanager
    def hold(self, resource_id: Optional[str]) -> Iterator[None]:
        if not resource_id:
            yield
            return

        with self._guard:
            entry = self._entries.setdefault(resource_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[resource_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
