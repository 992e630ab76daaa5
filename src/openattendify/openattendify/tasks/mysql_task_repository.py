from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import TaskState
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Task
from .repository import TaskRepository

_COLUMNS = (
    "task_id, account_id, sequence, name, description, work_date, project_id, employee_id, "
    "state, started_at, finished_at, total_hours"
)


def _to_task(r: Dict[str, Any]) -> Task:
    employee_id = r.get("employee_id")
    total_hours = r.get("total_hours")
    return Task(
        task_id=int(r["task_id"]),
        account_id=int(r["account_id"]),
        sequence=r["sequence"],
        name=r["name"],
        description=r.get("description"),
        work_date=r["work_date"],
        project_id=int(r["project_id"]),
        employee_id=int(employee_id) if employee_id is not None else None,
        state=TaskState(r["state"]),
        started_at=r.get("started_at"),
        finished_at=r.get("finished_at"),
        total_hours=Decimal(str(total_hours)) if total_hours is not None else None,
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE task_id=%s", (task_id,))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM tasks
                WHERE employee_id=%s
                ORDER BY state ASC, work_date DESC
                """,
                (employee_id,),
            )
            return [_to_task(r) for r in fetchall(cur)]

    def get_last_sequence(self, account_id: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sequence
                FROM tasks
                WHERE account_id=%s
                ORDER BY created_at DESC, task_id DESC
                LIMIT 1
                """,
                (account_id,),
            )
            r = fetchone(cur)
            return r["sequence"] if r else None

    def project_belongs_to_account(self, project_id: int, account_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM projects p
                JOIN companies c ON c.company_id = p.company_id
                WHERE p.project_id=%s AND c.account_id=%s
                """,
                (project_id, account_id),
            )
            return fetchone(cur) is not None

    def create_task(
        self,
        *,
        account_id: int,
        sequence: str,
        name: str,
        description: Optional[str],
        work_date: date,
        project_id: int,
        employee_id: Optional[int],
        state: TaskState,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO tasks(account_id, sequence, name, description, work_date, project_id, employee_id, state)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (account_id, sequence, name, description, work_date, project_id, employee_id, state.value),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError(f"task sequence {sequence} already taken") from None
            raise

    def update_progress(
        self,
        *,
        task_id: int,
        expected_state: TaskState,
        expected_started_at: Optional[datetime],
        state: TaskState,
        started_at: Optional[datetime],
        finished_at: Optional[datetime],
        total_hours: Optional[Decimal],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE tasks
                SET state=%s, started_at=%s, finished_at=%s, total_hours=%s
                WHERE task_id=%s AND state=%s AND started_at <=> %s
                """,
                (state.value, started_at, finished_at, total_hours, task_id, expected_state.value, expected_started_at),
            )
            return cur.rowcount > 0
