from __future__ import annotations

import logging
import threading
import time
import uuid
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import Callable, List, Optional

from ..cache.repository import LocalCache
from ..common.validators import require_iso_date, require_non_empty, require_status
from ..core.constants import DEFAULT_FLUSH_DELAY_SECONDS, DEFAULT_LOAD_TIMEOUT_SECONDS
from ..core.enums import AttendanceStatus, MarkAllScope, StatusFilter, StoreState
from ..core.exceptions import DuplicateNameError, NotReadyError, ValidationError
from ..roster.model import RosterEntry, name_key, sorted_by_name
from ..sync.gateway import SyncGateway
from .dirty import DirtySet, DirtySnapshot
from .model import AttendanceMap, Snapshot, Summary, copy_attendance
from .reconcile import merge_snapshots
from .scheduler import FlushScheduler

logger = logging.getLogger(__name__)

_NEXT_STATUS = {
    AttendanceStatus.UNSET: AttendanceStatus.PRESENT,
    AttendanceStatus.PRESENT: AttendanceStatus.ABSENT,
    AttendanceStatus.ABSENT: AttendanceStatus.LATE,
    AttendanceStatus.LATE: AttendanceStatus.PRESENT,
}


def _default_id() -> str:
    return uuid.uuid4().hex


def _in_background(name: str, fn: Callable[..., object], *args) -> Future:
    """Run `fn` on a daemon thread; a call that never returns does not block interpreter exit."""
    future: Future = Future()

    def run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(fn(*args))
        except BaseException as e:
            future.set_exception(e)

    threading.Thread(target=run, name=name, daemon=True).start()
    return future


class AttendanceStore:
    """In-memory roster and attendance state of one group session.

    Every change is written to the local cache right away. Changes that must reach the
    remote store are recorded in a dirty set and pushed by a debounced, best-effort flush.
    Mutators are only accepted once the initial load and merge finished (state READY).
    """

    def __init__(
        self,
        group_key: str,
        cache: LocalCache,
        gateway: SyncGateway,
        *,
        flush_delay: float = DEFAULT_FLUSH_DELAY_SECONDS,
        load_timeout: float = DEFAULT_LOAD_TIMEOUT_SECONDS,
        mark_all_scope: MarkAllScope = MarkAllScope.GROUP,
        id_factory: Callable[[], str] = _default_id,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self._group_key = require_non_empty(group_key, "Group")
        self._cache = cache
        self._gateway = gateway
        self._load_timeout = float(load_timeout)
        self._mark_all_scope = MarkAllScope(mark_all_scope)
        self._id_factory = id_factory

        self._lock = threading.RLock()
        self._state = StoreState.UNINITIALIZED
        self._roster: List[RosterEntry] = []
        self._attendance: AttendanceMap = {}
        self._dirty = DirtySet()
        self._scheduler = FlushScheduler(flush_delay, self.flush, timer_factory=timer_factory)

    # ----- state -----
    @property
    def group_key(self) -> str:
        return self._group_key

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._state == StoreState.READY

    @property
    def mark_all_scope(self) -> MarkAllScope:
        return self._mark_all_scope

    @property
    def flush_pending(self) -> bool:
        return self._scheduler.pending

    def load(self) -> None:
        """Merge the cached snapshot with the remote one, then become READY.

        A failing or slow remote degrades to an empty remote snapshot.
        """
        with self._lock:
            if self._state != StoreState.UNINITIALIZED:
                return
            self._state = StoreState.LOADING

        try:
            local, local_ok, remote = self._fetch_sources()
            merged = merge_snapshots(local, remote)
        except Exception:
            with self._lock:
                self._state = StoreState.UNINITIALIZED
            raise

        with self._lock:
            self._roster = list(merged.roster)
            self._attendance = merged.attendance
            self._state = StoreState.READY
            if local_ok:
                self._persist()
            else:
                logger.warning("Not rewriting local cache for group %s until the next change", self._group_key)
        logger.info(
            "Group %s ready: %d servers, %d dates", self._group_key, len(self._roster), len(self._attendance)
        )

    def _fetch_sources(self):
        prefix = f"load-{self._group_key}"
        local_future = _in_background(f"{prefix}-cache", self._cache.read)
        remote_future = _in_background(f"{prefix}-remote", self._gateway.load, self._group_key)
        deadline = time.monotonic() + self._load_timeout

        local_ok = False
        try:
            local = local_future.result(timeout=max(0.0, deadline - time.monotonic()))
            local_ok = True
        except FuturesTimeout:
            logger.warning("Local cache read for group %s timed out", self._group_key)
            local = None
        except Exception as e:
            logger.warning("Local cache for group %s unreadable: %s", self._group_key, e)
            local = None

        try:
            remote = remote_future.result(timeout=max(0.0, deadline - time.monotonic()))
        except FuturesTimeout:
            # the hung call is abandoned, its daemon thread is never joined
            logger.warning(
                "Remote load for group %s timed out after %.1fs", self._group_key, self._load_timeout
            )
            remote = None
        except Exception as e:
            logger.warning("Remote load for group %s failed: %s", self._group_key, e)
            remote = None
        return local, local_ok, remote

    def close(self) -> None:
        self._scheduler.cancel()

    # ----- roster -----
    @property
    def roster(self) -> List[RosterEntry]:
        with self._lock:
            return list(self._roster)

    def group_entries(self) -> List[RosterEntry]:
        with self._lock:
            return [e for e in self._roster if e.group_key == self._group_key]

    def get_entry(self, entry_id: str) -> Optional[RosterEntry]:
        with self._lock:
            return next((e for e in self._roster if e.entry_id == entry_id), None)

    def add_entry(self, name: str, group_key: Optional[str] = None) -> Optional[RosterEntry]:
        trimmed = (name or "").strip()
        if not trimmed:
            return None
        group = group_key or self._group_key

        with self._lock:
            self._require_ready()
            key = name_key(trimmed)
            if any(e.group_key == group and name_key(e.name) == key for e in self._roster):
                raise DuplicateNameError(f"{trimmed} is already on the roster")

            entry = RosterEntry(entry_id=self._new_id(), name=trimmed, group_key=group)
            self._roster = sorted_by_name([*self._roster, entry])
            self._dirty.mark_entry(entry)
            self._changed(dirty=True)
        return entry

    def remove_entry(self, entry_id: str) -> None:
        with self._lock:
            self._require_ready()
            self._require_entry(entry_id)
            self._remove(entry_id)
            self._changed(dirty=False)

    def remove_all(self, group_key: Optional[str] = None) -> int:
        group = group_key or self._group_key
        with self._lock:
            self._require_ready()
            ids = [e.entry_id for e in self._roster if e.group_key == group]
            for entry_id in ids:
                self._remove(entry_id)
            self._changed(dirty=False)
        return len(ids)

    def _remove(self, entry_id: str) -> None:
        self._roster = [e for e in self._roster if e.entry_id != entry_id]
        # the date bucket itself stays, possibly empty
        for bucket in self._attendance.values():
            bucket.pop(entry_id, None)
        self._dirty.drop_entry(entry_id)

    # ----- attendance -----
    def set_status(self, work_date: str, entry_id: str, status) -> None:
        work_date = require_iso_date(work_date)
        status = require_status(status)
        with self._lock:
            self._require_ready()
            self._require_entry(entry_id)
            self._attendance.setdefault(work_date, {})[entry_id] = status
            self._dirty.mark_status(work_date, entry_id, status)
            self._changed(dirty=True)

    def cycle_status(self, work_date: str, entry_id: str) -> AttendanceStatus:
        with self._lock:
            nxt = _NEXT_STATUS[self.status_of(work_date, entry_id)]
            self.set_status(work_date, entry_id, nxt)
        return nxt

    def set_all_status(
        self,
        work_date: str,
        status,
        scope: Optional[MarkAllScope] = None,
        status_filter: StatusFilter = StatusFilter.ALL,
    ) -> int:
        """Mark every scoped entry with `status` for one date; returns how many were marked.

        GROUP scope replaces the whole date row with the group's entries. VISIBLE scope only
        overwrites entries that pass `status_filter` and leaves the rest of the row alone.
        """
        work_date = require_iso_date(work_date)
        status = require_status(status)
        scope = MarkAllScope(scope) if scope else self._mark_all_scope

        with self._lock:
            self._require_ready()
            if scope == MarkAllScope.GROUP:
                targets = self.group_entries()
                row = {e.entry_id: status for e in targets}
                self._attendance[work_date] = dict(row)
                self._dirty.replace_date(work_date, row)
            else:
                targets = self.visible_entries(work_date, status_filter)
                bucket = self._attendance.setdefault(work_date, {})
                for e in targets:
                    bucket[e.entry_id] = status
                    self._dirty.mark_status(work_date, e.entry_id, status)
            self._changed(dirty=True)
        return len(targets)

    def clear_date(self, work_date: str) -> None:
        work_date = require_iso_date(work_date)
        with self._lock:
            self._require_ready()
            self._attendance.pop(work_date, None)
            self._dirty.drop_date(work_date)
            self._changed(dirty=False)

    def status_of(self, work_date: str, entry_id: str) -> AttendanceStatus:
        with self._lock:
            return self._attendance.get(work_date, {}).get(entry_id, AttendanceStatus.UNSET)

    def visible_entries(self, work_date: str, status_filter: StatusFilter = StatusFilter.ALL) -> List[RosterEntry]:
        """Group entries shown under a display filter; the absent filter also shows unmarked ones."""
        status_filter = StatusFilter(status_filter)
        with self._lock:
            bucket = self._attendance.get(work_date, {})
            entries = self.group_entries()
        if status_filter == StatusFilter.ALL:
            return entries
        if status_filter == StatusFilter.ABSENT:
            return [e for e in entries if bucket.get(e.entry_id) in (None, AttendanceStatus.ABSENT)]
        wanted = AttendanceStatus(status_filter.value)
        return [e for e in entries if bucket.get(e.entry_id) == wanted]

    def summarize(self, entry_id: str) -> Summary:
        present = absent = late = total = 0
        with self._lock:
            for bucket in self._attendance.values():
                val = bucket.get(entry_id)
                if val is None:
                    continue
                if val == AttendanceStatus.PRESENT:
                    present += 1
                elif val == AttendanceStatus.ABSENT:
                    absent += 1
                elif val == AttendanceStatus.LATE:
                    late += 1
                total += 1
        return Summary(present=present, absent=absent, late=late, total=total)

    @property
    def attendance(self) -> AttendanceMap:
        with self._lock:
            return copy_attendance(self._attendance)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(roster=list(self._roster), attendance=copy_attendance(self._attendance))

    # ----- sync -----
    @property
    def pending_changes(self) -> int:
        with self._lock:
            return len(self._dirty)

    def dirty_snapshot(self) -> DirtySnapshot:
        with self._lock:
            return self._dirty.snapshot()

    def flush(self) -> bool:
        """Push the current dirty snapshot upstream once.

        On success only the snapshot's keys are cleared; on failure everything stays dirty
        and nothing is retried until the next change re-arms the timer.
        """
        with self._lock:
            snap = self._dirty.snapshot()
        if snap.is_empty():
            return True

        try:
            self._gateway.save(snap.pending_entries, snap.attendance)
        except Exception as e:
            logger.warning("Sync of %d changes for group %s failed: %s", snap.change_count(), self._group_key, e)
            return False

        with self._lock:
            self._dirty.discard(snap)
        logger.info("Synced %d changes for group %s", snap.change_count(), self._group_key)
        return True

    # ----- helpers -----
    def _require_ready(self) -> None:
        if self._state != StoreState.READY:
            raise NotReadyError(f"Group {self._group_key} is still {self._state.value}")

    def _require_entry(self, entry_id: str) -> None:
        if not any(e.entry_id == entry_id for e in self._roster):
            raise ValidationError(f"Unknown altar server: {entry_id!r}")

    def _new_id(self) -> str:
        taken = {e.entry_id for e in self._roster}
        while True:
            entry_id = str(self._id_factory())
            if entry_id not in taken:
                return entry_id

    def _persist(self) -> None:
        try:
            self._cache.write(Snapshot(roster=list(self._roster), attendance=copy_attendance(self._attendance)))
        except Exception:
            logger.exception("Could not write local cache for group %s", self._group_key)

    def _changed(self, *, dirty: bool) -> None:
        self._persist()
        if dirty:
            self._scheduler.touch()
