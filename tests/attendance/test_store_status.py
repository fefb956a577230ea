from __future__ import annotations

import pytest

from src.altar_attendance.altar_attendance.attendance.model import Snapshot
from src.altar_attendance.altar_attendance.cache.repository import InMemoryCache
from src.altar_attendance.altar_attendance.core.enums import AttendanceStatus, MarkAllScope, StatusFilter
from src.altar_attendance.altar_attendance.core.exceptions import ValidationError


def test_late_counts_once_regardless_of_other_dates(store, work_date):
    a = store.add_entry("Ana")
    b = store.add_entry("Ben")
    store.set_status("2024-01-01", b.entry_id, "present")

    store.set_status(work_date, a.entry_id, "late")

    s = store.summarize(a.entry_id)
    assert (s.present, s.absent, s.late, s.total) == (0, 0, 1, 1)


def test_set_status_overwrites_and_mirrors_into_dirty(store, work_date):
    a = store.add_entry("Ana")
    store.set_status(work_date, a.entry_id, AttendanceStatus.PRESENT)
    store.set_status(work_date, a.entry_id, "absent")

    assert store.attendance == {work_date: {a.entry_id: AttendanceStatus.ABSENT}}
    assert store.dirty_snapshot().attendance == {work_date: {a.entry_id: AttendanceStatus.ABSENT}}


@pytest.mark.parametrize("bad_date", ["2024-13-01", "2024-1-7", "07/01/2024", ""])
def test_set_status_rejects_bad_dates(store, bad_date):
    a = store.add_entry("Ana")
    with pytest.raises(ValidationError):
        store.set_status(bad_date, a.entry_id, "present")


def test_set_status_rejects_unset_and_unknown_values(store, work_date):
    a = store.add_entry("Ana")
    with pytest.raises(ValidationError):
        store.set_status(work_date, a.entry_id, "unset")
    with pytest.raises(ValidationError):
        store.set_status(work_date, a.entry_id, "excused")
    with pytest.raises(ValidationError):
        store.set_status(work_date, "missing", "present")
    assert store.attendance == {}


def test_cycle_status_walks_the_three_states(store, work_date):
    a = store.add_entry("Ana")

    seen = [store.cycle_status(work_date, a.entry_id) for _ in range(4)]

    assert seen == [
        AttendanceStatus.PRESENT,
        AttendanceStatus.ABSENT,
        AttendanceStatus.LATE,
        AttendanceStatus.PRESENT,
    ]


def test_mark_all_group_scope_replaces_the_date_row(make_store, work_date):
    # cached row still holds an id that is no longer on the roster
    cached = Snapshot(attendance={work_date: {"ghost": AttendanceStatus.PRESENT}})
    store = make_store(cache=InMemoryCache(cached))
    a = store.add_entry("Ana")
    b = store.add_entry("Ben")
    store.set_status(work_date, a.entry_id, "late")

    marked = store.set_all_status(work_date, "present")

    assert marked == 2
    expected = {a.entry_id: AttendanceStatus.PRESENT, b.entry_id: AttendanceStatus.PRESENT}
    assert store.attendance[work_date] == expected
    assert store.dirty_snapshot().attendance[work_date] == expected


def test_mark_all_visible_scope_only_touches_filtered_rows(make_store, work_date):
    store = make_store(mark_all_scope=MarkAllScope.VISIBLE)
    a = store.add_entry("Ana")
    b = store.add_entry("Ben")
    c = store.add_entry("Cara")
    store.set_status(work_date, a.entry_id, "present")
    store.set_status(work_date, b.entry_id, "absent")

    # absent filter shows Ben (absent) and Cara (unmarked)
    marked = store.set_all_status(work_date, "late", status_filter=StatusFilter.ABSENT)

    assert marked == 2
    assert store.attendance[work_date] == {
        a.entry_id: AttendanceStatus.PRESENT,
        b.entry_id: AttendanceStatus.LATE,
        c.entry_id: AttendanceStatus.LATE,
    }


def test_mark_all_scope_can_be_overridden_per_call(store, work_date):
    a = store.add_entry("Ana")
    b = store.add_entry("Ben")
    store.set_status(work_date, a.entry_id, "present")

    store.set_all_status(work_date, "absent", scope="visible", status_filter="absent")

    assert store.status_of(work_date, a.entry_id) == AttendanceStatus.PRESENT
    assert store.status_of(work_date, b.entry_id) == AttendanceStatus.ABSENT


def test_clear_date_removes_date_everywhere(store, work_date):
    a = store.add_entry("Ana")
    store.set_status(work_date, a.entry_id, "present")
    store.set_status("2024-01-14", a.entry_id, "late")

    store.clear_date(work_date)

    assert work_date not in store.attendance
    assert work_date not in store.dirty_snapshot().attendance
    s = store.summarize(a.entry_id)
    assert (s.present, s.late, s.total) == (0, 1, 1)


def test_absent_filter_shows_unmarked_but_summary_does_not_count_them(store, work_date):
    a = store.add_entry("Ana")
    b = store.add_entry("Ben")
    store.set_status(work_date, a.entry_id, "present")

    visible = store.visible_entries(work_date, StatusFilter.ABSENT)

    assert [e.entry_id for e in visible] == [b.entry_id]
    assert store.summarize(b.entry_id).total == 0
    assert store.status_of(work_date, b.entry_id) == AttendanceStatus.UNSET


def test_visible_entries_by_exact_status(store, work_date):
    a = store.add_entry("Ana")
    b = store.add_entry("Ben")
    store.set_status(work_date, a.entry_id, "late")
    store.set_status(work_date, b.entry_id, "present")

    assert [e.name for e in store.visible_entries(work_date, "late")] == ["Ana"]
    assert [e.name for e in store.visible_entries(work_date, "present")] == ["Ben"]
    assert [e.name for e in store.visible_entries(work_date, "all")] == ["Ana", "Ben"]


def test_every_change_is_written_to_the_cache(make_store, work_date):
    cache = InMemoryCache()
    store = make_store(cache=cache)
    writes_after_load = cache.writes

    a = store.add_entry("Ana")
    store.set_status(work_date, a.entry_id, "present")
    store.clear_date(work_date)
    store.remove_entry(a.entry_id)

    assert cache.writes == writes_after_load + 4
    assert cache.read() == store.snapshot()
