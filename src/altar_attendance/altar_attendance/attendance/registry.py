from __future__ import annotations

import threading
from typing import Callable, Dict

from .store import AttendanceStore

StoreFactory = Callable[[str], AttendanceStore]


class StoreRegistry:
    """One loaded store per group, owned by the application instead of a global."""

    def __init__(self, factory: StoreFactory):
        self._factory = factory
        self._stores: Dict[str, AttendanceStore] = {}
        self._lock = threading.Lock()

    def get(self, group_key: str) -> AttendanceStore:
        """Return the group's store, creating and loading it on first use."""
        with self._lock:
            store = self._stores.get(group_key)
            if store is None:
                store = self._factory(group_key)
                self._stores[group_key] = store
        # loading outside the registry lock; load() is a no-op once started
        store.load()
        return store

    def close_all(self) -> None:
        with self._lock:
            stores = list(self._stores.values())
        for store in stores:
            store.close()
