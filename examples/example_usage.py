"""Example: drive one group's store directly (no Flask).

Controllers are a thin layer; the roster and attendance rules live in AttendanceStore.
"""

import importlib

from config import get_settings_module

from src.altar_attendance.altar_attendance.common.datetime_utils import today_iso
from src.altar_attendance.altar_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        leader_accounts=settings.LEADER_ACCOUNTS,
        sync_enabled=settings.SYNC_ENABLED,
        cache_dir=settings.CACHE_DIR,
    )
    store = container.stores.get("8am")
    today = today_iso()

    entries = store.group_entries()
    entry = entries[0] if entries else store.add_entry("Juan Dela Cruz")
    store.set_status(today, entry.entry_id, "late")
    print(entry.name, store.summarize(entry.entry_id))

    store.flush()
    container.stores.close_all()


if __name__ == "__main__":
    main()
