from __future__ import annotations

from typing import Optional, Protocol

from ..attendance.model import Snapshot


class LocalCache(Protocol):
    """Local-first copy of one group's roster and attendance.

    Note (DIP): the store depends on this interface, not on a concrete storage.
    """

    def read(self) -> Optional[Snapshot]:
        """Return the last written snapshot, or None when nothing was cached yet."""

        raise NotImplementedError

    def write(self, snapshot: Snapshot) -> None:
        raise NotImplementedError


class InMemoryCache(LocalCache):
    def __init__(self, snapshot: Optional[Snapshot] = None):
        self._data = snapshot.to_dict() if snapshot else None
        self.writes = 0

    def read(self) -> Optional[Snapshot]:
        if self._data is None:
            return None
        return Snapshot.from_dict(self._data)

    def write(self, snapshot: Snapshot) -> None:
        self._data = snapshot.to_dict()
        self.writes += 1
