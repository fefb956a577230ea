from __future__ import annotations

from typing import Protocol, Sequence

from ..attendance.model import AttendanceMap, Snapshot
from ..roster.model import RosterEntry


class SyncGateway(Protocol):
    """Remote table store, treated as fallible and eventually consistent.

    `load` raises LoadFailure and `save` raises SaveFailure; callers wrap both as best-effort.
    """

    def load(self, group_key: str) -> Snapshot:
        raise NotImplementedError

    def save(self, roster: Sequence[RosterEntry], attendance: AttendanceMap) -> None:
        """Upsert roster entries keyed by id and statuses keyed by (date, entry id)."""

        raise NotImplementedError


class NullSyncGateway(SyncGateway):
    """Used when remote sync is switched off: nothing upstream, every save succeeds."""

    def load(self, group_key: str) -> Snapshot:
        return Snapshot()

    def save(self, roster: Sequence[RosterEntry], attendance: AttendanceMap) -> None:
        return None
