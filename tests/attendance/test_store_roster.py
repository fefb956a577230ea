from __future__ import annotations

import threading

import pytest

from src.altar_attendance.altar_attendance.attendance.model import Snapshot
from src.altar_attendance.altar_attendance.cache.repository import InMemoryCache
from src.altar_attendance.altar_attendance.core.enums import AttendanceStatus, StoreState
from src.altar_attendance.altar_attendance.core.exceptions import DuplicateNameError, NotReadyError, ValidationError
from src.altar_attendance.altar_attendance.roster.model import RosterEntry, name_key


def test_add_entry_trims_and_keeps_roster_sorted(store):
    store.add_entry("  maria  ")
    store.add_entry("Andres")
    store.add_entry("carlo")

    assert [e.name for e in store.roster] == ["Andres", "carlo", "maria"]
    assert all(e.group_key == "8am" for e in store.roster)


def test_add_blank_name_is_silently_ignored(store, timers):
    assert store.add_entry("   ") is None
    assert store.roster == []
    assert store.pending_changes == 0
    assert timers.armed == []


def test_add_duplicate_name_in_same_group_is_rejected(store):
    store.add_entry("Maria Santos")

    with pytest.raises(DuplicateNameError):
        store.add_entry("  maria SANTOS ")

    assert len(store.roster) == 1


def test_same_name_is_allowed_in_another_group(store):
    store.add_entry("Maria Santos")
    other = store.add_entry("Maria Santos", group_key="10am")

    assert other.group_key == "10am"
    assert len(store.roster) == 2
    assert [e.name for e in store.group_entries()] == ["Maria Santos"]


def test_add_marks_entry_pending_and_arms_flush(store, timers):
    entry = store.add_entry("Juan")

    dirty = store.dirty_snapshot()
    assert [e.entry_id for e in dirty.pending_entries] == [entry.entry_id]
    assert len(timers.armed) == 1


def test_roster_never_holds_duplicate_names_per_group(store):
    names = ["Ana", "ana", "Ben", " BEN", "Cara", "ana ", "Dan"]
    for i, name in enumerate(names):
        try:
            entry = store.add_entry(name)
        except DuplicateNameError:
            continue
        if i % 3 == 0:
            store.remove_entry(entry.entry_id)
            store.add_entry(name)

    keys = [(e.group_key, name_key(e.name)) for e in store.roster]
    assert len(keys) == len(set(keys))


def test_remove_entry_cascades_to_attendance_and_dirty(store, work_date):
    a = store.add_entry("Ana")
    b = store.add_entry("Ben")
    store.set_status(work_date, a.entry_id, "present")
    store.set_status("2024-01-14", a.entry_id, "late")
    store.set_status(work_date, b.entry_id, "absent")

    store.remove_entry(a.entry_id)

    assert store.get_entry(a.entry_id) is None
    assert all(a.entry_id not in bucket for bucket in store.attendance.values())
    dirty = store.dirty_snapshot()
    assert all(a.entry_id not in bucket for bucket in dirty.attendance.values())
    assert [e.entry_id for e in dirty.pending_entries] == [b.entry_id]
    assert store.summarize(a.entry_id).to_dict() == {"present": 0, "absent": 0, "late": 0, "total": 0}
    assert store.status_of(work_date, b.entry_id) == AttendanceStatus.ABSENT


def test_remove_unknown_entry_raises(store):
    with pytest.raises(ValidationError):
        store.remove_entry("missing")


def test_remove_all_clears_only_the_group(store, work_date):
    a = store.add_entry("Ana")
    store.add_entry("Ben")
    other = store.add_entry("Cara", group_key="6pm")
    store.set_status(work_date, a.entry_id, "present")

    removed = store.remove_all()

    assert removed == 2
    assert store.roster == [other]
    assert store.attendance == {work_date: {}}


def test_mutators_are_rejected_before_load(make_store, work_date):
    cache = InMemoryCache()
    store = make_store(cache=cache, load=False)

    assert store.state == StoreState.UNINITIALIZED
    with pytest.raises(NotReadyError):
        store.add_entry("Ana")
    with pytest.raises(NotReadyError):
        store.clear_date(work_date)

    assert store.roster == []
    assert cache.writes == 0


def test_roster_order_follows_unicode_collation(store):
    for name in ["Oscar", "Ñino", "Nadia", "Ángel", "Zed", "Bea"]:
        store.add_entry(name)

    assert [e.name for e in store.roster] == ["Ángel", "Bea", "Nadia", "Ñino", "Oscar", "Zed"]


def test_mutators_are_rejected_while_loading(make_store, gateway, work_date):
    remote_entry = RosterEntry(entry_id="r1", name="Ana", group_key="8am")
    gateway.remote = Snapshot(roster=[remote_entry])
    remote_load = gateway.load
    rejected = []

    def load_while_users_click(group_key):
        for attempt in (
            lambda: store.add_entry("Ben"),
            lambda: store.set_status(work_date, "r1", "present"),
        ):
            try:
                attempt()
            except NotReadyError as e:
                rejected.append(e)
        return remote_load(group_key)

    gateway.load = load_while_users_click
    store = make_store(load=False)
    store.load()

    assert len(rejected) == 2
    assert store.state == StoreState.READY
    assert store.roster == [remote_entry]
    assert store.attendance == {}
    assert store.pending_changes == 0


def test_failed_cache_read_leaves_cache_untouched(make_store):
    class UnreadableCache(InMemoryCache):
        def read(self):
            raise OSError("disk error")

    cache = UnreadableCache()
    store = make_store(cache=cache)

    assert store.state == StoreState.READY
    assert cache.writes == 0

    store.add_entry("Ana")
    assert cache.writes == 1


def test_hung_remote_load_is_abandoned_on_a_daemon_thread(make_store, gateway):
    release = threading.Event()
    remote_load = gateway.load

    def hung_load(group_key):
        release.wait(5)
        return remote_load(group_key)

    gateway.load = hung_load
    try:
        store = make_store(load_timeout=0.05)

        assert store.state == StoreState.READY
        hung = [t for t in threading.enumerate() if t.name == "load-8am-remote"]
        assert hung and all(t.daemon for t in hung)
    finally:
        release.set()
