from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Employee
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.employee_id, c.account_id, e.full_name, e.code, e.national_id, e.email, e.is_active
                FROM employees e
                JOIN companies c ON c.company_id = e.company_id
                WHERE e.employee_id=%s
                """,
                (employee_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Employee(
                employee_id=int(row["employee_id"]),
                account_id=int(row["account_id"]),
                full_name=row["full_name"],
                code=row["code"],
                national_id=row["national_id"],
                email=row.get("email"),
                is_active=bool(row.get("is_active", True)),
            )
