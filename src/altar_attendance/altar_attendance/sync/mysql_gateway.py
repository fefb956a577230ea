from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

import mysql.connector

from ..attendance.model import AttendanceMap, Snapshot
from ..common.datetime_utils import format_iso_date
from ..core.enums import AttendanceStatus
from ..core.exceptions import LoadFailure, SaveFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_placeholders
from ..roster.model import RosterEntry
from .gateway import SyncGateway

logger = logging.getLogger(__name__)


def _date_key(value) -> str:
    if isinstance(value, date):
        return format_iso_date(value)
    return str(value)


class MySQLSyncGateway(SyncGateway):
    """Sync against the `altar_servers` / `attendance_records` tables."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load(self, group_key: str) -> Snapshot:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT id, name, group_name
                    FROM altar_servers
                    WHERE group_name=%s
                    """,
                    (group_key,),
                )
                roster = [
                    RosterEntry(entry_id=str(r["id"]), name=str(r["name"]), group_key=str(r["group_name"]))
                    for r in fetchall(cur)
                ]

                attendance: AttendanceMap = {}
                if roster:
                    ids = [e.entry_id for e in roster]
                    cur.execute(
                        f"""
                        SELECT server_id, date, status
                        FROM attendance_records
                        WHERE server_id IN ({in_placeholders(ids)})
                        """,
                        tuple(ids),
                    )
                    for r in fetchall(cur):
                        status = AttendanceStatus(r["status"])
                        if status == AttendanceStatus.UNSET:
                            continue
                        attendance.setdefault(_date_key(r["date"]), {})[str(r["server_id"])] = status
        except (mysql.connector.Error, ValueError) as e:
            raise LoadFailure(f"Could not load group {group_key!r}: {e}") from e

        logger.debug("Loaded %d servers for group %s", len(roster), group_key)
        return Snapshot(roster=roster, attendance=attendance)

    def save(self, roster: Sequence[RosterEntry], attendance: AttendanceMap) -> None:
        server_rows = [(e.entry_id, e.name, e.group_key) for e in roster]
        record_rows = [
            (entry_id, work_date, AttendanceStatus(status).value)
            for work_date, bucket in attendance.items()
            for entry_id, status in bucket.items()
        ]
        if not server_rows and not record_rows:
            return

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # servers first: records reference them
                if server_rows:
                    cur.executemany(
                        """
                        INSERT INTO altar_servers(id, name, group_name)
                        VALUES(%s,%s,%s)
                        ON DUPLICATE KEY UPDATE name=VALUES(name), group_name=VALUES(group_name)
                        """,
                        server_rows,
                    )
                if record_rows:
                    cur.executemany(
                        """
                        INSERT INTO attendance_records(server_id, date, status)
                        VALUES(%s,%s,%s)
                        ON DUPLICATE KEY UPDATE status=VALUES(status)
                        """,
                        record_rows,
                    )
        except mysql.connector.Error as e:
            raise SaveFailure(f"Could not save {len(server_rows)} servers / {len(record_rows)} records: {e}") from e
