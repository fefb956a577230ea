from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..core.enums import AttendanceStatus
from ..roster.model import RosterEntry

logger = logging.getLogger(__name__)

# date (YYYY-MM-DD) -> entry id -> status
AttendanceMap = Dict[str, Dict[str, AttendanceStatus]]


def copy_attendance(attendance: AttendanceMap) -> AttendanceMap:
    return {d: dict(bucket) for d, bucket in attendance.items()}


def attendance_to_dict(attendance: AttendanceMap) -> Dict[str, Dict[str, str]]:
    return {d: {eid: AttendanceStatus(s).value for eid, s in bucket.items()} for d, bucket in attendance.items()}


def attendance_from_dict(data: Dict[str, Any]) -> AttendanceMap:
    """Parse stored records; unknown statuses are skipped so one bad row loses only itself."""
    result: AttendanceMap = {}
    for d, bucket in (data or {}).items():
        if not isinstance(bucket, dict):
            logger.warning("Skipping malformed attendance bucket for %s", d)
            continue
        row = {}
        for eid, value in bucket.items():
            if not value:
                continue
            try:
                status = AttendanceStatus(value)
            except ValueError:
                logger.warning("Skipping unknown status %r for %s on %s", value, eid, d)
                continue
            if status != AttendanceStatus.UNSET:
                row[str(eid)] = status
        result[str(d)] = row
    return result


def roster_from_list(items: Any) -> List[RosterEntry]:
    roster: List[RosterEntry] = []
    for item in items or []:
        try:
            roster.append(RosterEntry.from_dict(item))
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Skipping malformed roster row %r: %s", item, e)
    return roster


@dataclass
class Snapshot:
    """Roster plus attendance map, as exchanged with the local cache and the remote store."""

    roster: List[RosterEntry] = field(default_factory=list)
    attendance: AttendanceMap = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "altar_servers": [e.to_dict() for e in self.roster],
            "records": attendance_to_dict(self.attendance),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        records = data.get("records", {})
        return cls(
            roster=roster_from_list(data.get("altar_servers", [])),
            attendance=attendance_from_dict(records if isinstance(records, dict) else {}),
        )


@dataclass(frozen=True)
class Summary:
    present: int = 0
    absent: int = 0
    late: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"present": self.present, "absent": self.absent, "late": self.late, "total": self.total}
