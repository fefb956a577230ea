from __future__ import annotations

import csv
import io

from .store import AttendanceStore

CSV_HEADER = ["Name", "Status", "Present", "Absent", "Late", "Total"]


def export_csv(store: AttendanceStore, work_date: str) -> str:
    """Group roster with the day's status and the running tallies of each server."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)
    for entry in store.group_entries():
        s = store.summarize(entry.entry_id)
        writer.writerow(
            [entry.name, store.status_of(work_date, entry.entry_id).value, s.present, s.absent, s.late, s.total]
        )
    return output.getvalue()
