from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Attendance
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, employee_id, check_in, check_out, remote_attendance_id, sync_error"


def _to_attendance(r: Dict[str, Any]) -> Attendance:
    remote_id = r.get("remote_attendance_id")
    return Attendance(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        check_in=r["check_in"],
        check_out=r.get("check_out"),
        remote_attendance_id=int(remote_id) if remote_id is not None else None,
        sync_error=r.get("sync_error"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendances WHERE attendance_id=%s", (attendance_id,))
            r = fetchone(cur)
            return _to_attendance(r) if r else None

    def get_active_for_employee(self, employee_id: int) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE employee_id=%s AND check_out IS NULL
                ORDER BY check_in DESC
                LIMIT 1
                """,
                (employee_id,),
            )
            r = fetchone(cur)
            return _to_attendance(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE employee_id=%s
                ORDER BY check_in DESC
                LIMIT %s
                """,
                (employee_id, int(limit)),
            )
            return [_to_attendance(r) for r in fetchall(cur)]

    def create_checkin(self, *, employee_id: int, check_in: datetime) -> int:
        # uq_attendances_open_session rejects a second open row for the employee.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO attendances(employee_id, check_in) VALUES(%s,%s)",
                    (employee_id, check_in),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("already checked in") from None
            raise

    def close_session(self, *, attendance_id: int, check_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendances
                SET check_out=%s
                WHERE attendance_id=%s AND check_out IS NULL
                """,
                (check_out, attendance_id),
            )
            return cur.rowcount > 0

    def set_remote_attendance_id(self, *, attendance_id: int, remote_attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendances SET remote_attendance_id=%s, sync_error=NULL WHERE attendance_id=%s",
                (int(remote_attendance_id), attendance_id),
            )
            return cur.rowcount > 0

    def set_sync_error(self, *, attendance_id: int, message: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendances SET sync_error=%s WHERE attendance_id=%s",
                (message, attendance_id),
            )
            return cur.rowcount > 0

    def clear_sync_error(self, *, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendances SET sync_error=NULL WHERE attendance_id=%s", (attendance_id,))
            return cur.rowcount > 0
