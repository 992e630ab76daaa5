from __future__ import annotations

from enum import Enum


class TaskState(str, Enum):
    """Task workflow states stored in the database."""

    DRAFT = "DRAFT"
    ASSIGNED = "ASSIGNED"
    WORKING = "WORKING"
    DONE = "DONE"


class TaskAction(str, Enum):
    """Action tokens accepted by the employee task endpoint."""

    START = "iniciar"
    PAUSE = "detener"
    FINISH = "finalizar"


class SyncDirection(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class SyncStatus(str, Enum):
    """Outcome of a sync attempt that did not raise."""

    NOT_CONFIGURED = "NOT_CONFIGURED"
    SYNCED = "SYNCED"


class LookupField(str, Enum):
    """Employee attribute used to find the employee in the ERP."""

    EMAIL = "email"
    NATIONAL_ID = "nationalId"
    CODE = "code"


class IntegrationType(str, Enum):
    ODOO = "ODOO"
