from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..core.enums import AttendanceStatus
from ..roster.model import RosterEntry
from .model import AttendanceMap, copy_attendance


@dataclass(frozen=True)
class DirtySnapshot:
    """Frozen copy of the dirty set taken right before a flush."""

    pending_entries: List[RosterEntry]
    attendance: AttendanceMap

    def is_empty(self) -> bool:
        return not self.pending_entries and not any(self.attendance.values())

    def change_count(self) -> int:
        return len(self.pending_entries) + sum(len(b) for b in self.attendance.values())


@dataclass
class DirtySet:
    """Changes recorded in memory but not yet confirmed written upstream."""

    attendance: AttendanceMap = field(default_factory=dict)
    pending_entries: List[RosterEntry] = field(default_factory=list)

    def mark_entry(self, entry: RosterEntry) -> None:
        self.pending_entries = [e for e in self.pending_entries if e.entry_id != entry.entry_id]
        self.pending_entries.append(entry)

    def mark_status(self, work_date: str, entry_id: str, status: AttendanceStatus) -> None:
        self.attendance.setdefault(work_date, {})[entry_id] = status

    def replace_date(self, work_date: str, row: Dict[str, AttendanceStatus]) -> None:
        if row:
            self.attendance[work_date] = dict(row)
        else:
            self.attendance.pop(work_date, None)

    def drop_date(self, work_date: str) -> None:
        self.attendance.pop(work_date, None)

    def drop_entry(self, entry_id: str) -> None:
        self.pending_entries = [e for e in self.pending_entries if e.entry_id != entry_id]
        for bucket in self.attendance.values():
            bucket.pop(entry_id, None)
        self._prune()

    def snapshot(self) -> DirtySnapshot:
        return DirtySnapshot(pending_entries=list(self.pending_entries), attendance=copy_attendance(self.attendance))

    def discard(self, snap: DirtySnapshot) -> None:
        """Forget what `snap` carried.

        A key rewritten with another value after the snapshot was taken stays dirty.
        """
        flushed_ids = {e.entry_id for e in snap.pending_entries}
        self.pending_entries = [e for e in self.pending_entries if e.entry_id not in flushed_ids]

        for work_date, row in snap.attendance.items():
            bucket = self.attendance.get(work_date)
            if bucket is None:
                continue
            for entry_id, status in row.items():
                if bucket.get(entry_id) == status:
                    del bucket[entry_id]
        self._prune()

    def __len__(self) -> int:
        return len(self.pending_entries) + sum(len(b) for b in self.attendance.values())

    def _prune(self) -> None:
        for work_date in [d for d, bucket in self.attendance.items() if not bucket]:
            del self.attendance[work_date]
