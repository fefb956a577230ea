from __future__ import annotations

from typing import List, Optional

from ..roster.model import RosterEntry
from .model import AttendanceMap, Snapshot


def merge_roster(local: List[RosterEntry], remote: List[RosterEntry]) -> List[RosterEntry]:
    """Union by id; local entries come first so they shadow remote ones with the same id."""
    seen = set()
    merged = []
    for entry in [*local, *remote]:
        if entry.entry_id in seen:
            continue
        seen.add(entry.entry_id)
        merged.append(entry)
    return merged


def merge_attendance(local: AttendanceMap, remote: AttendanceMap) -> AttendanceMap:
    """Last writer wins per date: a local date bucket replaces the remote one wholesale."""
    merged = {d: dict(bucket) for d, bucket in remote.items()}
    for d, bucket in local.items():
        merged[d] = dict(bucket)
    return merged


def merge_snapshots(local: Optional[Snapshot], remote: Optional[Snapshot]) -> Snapshot:
    local = local or Snapshot()
    remote = remote or Snapshot()
    return Snapshot(
        roster=merge_roster(local.roster, remote.roster),
        attendance=merge_attendance(local.attendance, remote.attendance),
    )
