from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import ERP_EMPLOYEE_CODE_FIELD
from ..core.enums import LookupField
from ..core.exceptions import ErpConfigError, ErpNotFoundError, ErpRemoteError
from ..employees.model import Employee
from ..integrations.model import SyncConfig
from .auth import RemoteSession

logger = logging.getLogger(__name__)

REMOTE_LOOKUP_FIELDS = {
    LookupField.EMAIL: "work_email",
    LookupField.NATIONAL_ID: "identification_id",
    LookupField.CODE: ERP_EMPLOYEE_CODE_FIELD,
}


def local_lookup_value(employee: Employee, field: LookupField) -> Optional[str]:
    value = {
        LookupField.EMAIL: employee.email,
        LookupField.NATIONAL_ID: employee.national_id,
        LookupField.CODE: employee.code,
    }[field]
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class EmployeeResolver:
    """Maps a local employee to its ``hr.employee`` id."""

    def resolve(self, config: SyncConfig, session: RemoteSession, employee: Employee) -> int:
        field = config.employee_lookup_field
        value = local_lookup_value(employee, field)
        if value is None:
            raise ErpConfigError(f"missing lookup value: employee {employee.employee_id} has no {field.value}")

        remote_field = REMOTE_LOOKUP_FIELDS[field]
        domain = [
            [remote_field, "=", value],
            ["company_id", "=", config.remote_company_id],
            ["active", "=", True],
        ]
        rows = session.execute_kw(
            "hr.employee",
            "search_read",
            [domain],
            {"fields": ["id", "name", remote_field, "company_id"], "limit": 1},
        )

        if not rows:
            logger.info(f"ERP employee lookup found nothing: {remote_field}={value} company={config.remote_company_id}")
            raise ErpNotFoundError(
                "employee not found in ERP",
                details={"field": remote_field, "value": value, "company": config.remote_company_id},
            )

        try:
            return int(rows[0]["id"])
        except (KeyError, TypeError, ValueError):
            raise ErpRemoteError(f"unexpected hr.employee row: {rows[0]!r}") from None
