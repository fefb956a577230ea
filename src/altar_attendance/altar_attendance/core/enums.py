from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance mark for one server on one date.

    UNSET is never stored; it is what a missing key means.
    """

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    UNSET = "unset"


class StatusFilter(str, Enum):
    """Display filter of the roster table."""

    ALL = "all"
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class MarkAllScope(str, Enum):
    """Which entries a "mark all" touches."""

    GROUP = "group"
    VISIBLE = "visible"


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
