"""Mirror local check-in/check-out events onto Odoo ``hr.attendance``.

Every attempt authenticates from scratch, resolves the employee and then
performs one write. Failures surface as ``SyncError`` subclasses; the caller
decides what to record. Nothing here retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import to_erp_timestamp
from ..core.constants import DEFAULT_ERP_TIMEOUT_SECONDS
from ..core.enums import SyncDirection, SyncStatus
from ..core.exceptions import ErpNotFoundError, ErpRemoteError
from ..employees.model import Employee
from ..integrations.model import SyncConfig
from ..integrations.repository import IntegrationRepository
from .auth import ErpAuthenticator, RemoteSession
from .resolver import EmployeeResolver
from .transport import JsonRpcTransport, RpcTransport

logger = logging.getLogger(__name__)

TransportFactory = Callable[[str], RpcTransport]


@dataclass(frozen=True)
class SyncResult:
    status: SyncStatus
    remote_attendance_id: Optional[int] = None


@dataclass(frozen=True)
class ConnectionReport:
    endpoint: str
    uid: int
    username: str
    company_id: int


class ErpAttendanceSync:
    def __init__(
        self,
        integrations: IntegrationRepository,
        *,
        authenticator: ErpAuthenticator | None = None,
        resolver: EmployeeResolver | None = None,
        transport_factory: TransportFactory | None = None,
        timeout_s: float = DEFAULT_ERP_TIMEOUT_SECONDS,
    ):
        self._integrations = integrations
        self._authenticator = authenticator or ErpAuthenticator()
        self._resolver = resolver or EmployeeResolver()
        self._transport_factory = transport_factory or (
            lambda endpoint: JsonRpcTransport(endpoint, timeout_s=timeout_s)
        )

    def _open_session(self, config: SyncConfig) -> RemoteSession:
        transport = self._transport_factory(config.endpoint_url)
        return self._authenticator.authenticate(config, transport)

    def sync_check_in(self, config: SyncConfig, employee: Employee, timestamp: datetime) -> int:
        session = self._open_session(config)
        remote_employee_id = self._resolver.resolve(config, session, employee)

        result = session.execute_kw(
            "hr.attendance",
            "create",
            [{"employee_id": remote_employee_id, "check_in": to_erp_timestamp(timestamp)}],
        )
        # Newer Odoo versions return a list of ids for create.
        if isinstance(result, list) and len(result) == 1:
            result = result[0]
        if isinstance(result, bool) or not isinstance(result, int):
            raise ErpRemoteError(f"unexpected hr.attendance create result: {result!r}")

        logger.info(f"ERP check-in created hr.attendance {result} for employee {employee.employee_id}")
        return result

    def sync_check_out(self, config: SyncConfig, employee: Employee, timestamp: datetime) -> bool:
        session = self._open_session(config)
        remote_employee_id = self._resolver.resolve(config, session, employee)

        rows = session.execute_kw(
            "hr.attendance",
            "search_read",
            [[["employee_id", "=", remote_employee_id], ["check_out", "=", False]]],
            {"fields": ["id"], "limit": 1, "order": "check_in desc"},
        )
        if not rows:
            raise ErpNotFoundError("no open ERP attendance", details={"employee": remote_employee_id})

        remote_attendance_id = int(rows[0]["id"])
        written = session.execute_kw(
            "hr.attendance",
            "write",
            [[remote_attendance_id], {"check_out": to_erp_timestamp(timestamp)}],
        )
        if not written:
            raise ErpRemoteError(f"ERP refused to close hr.attendance {remote_attendance_id}")

        logger.info(f"ERP check-out written on hr.attendance {remote_attendance_id} for employee {employee.employee_id}")
        return True

    def sync_attendance(
        self,
        account_id: int,
        employee: Employee,
        direction: SyncDirection,
        timestamp: datetime,
    ) -> SyncResult:
        """Entry point used by the attendance sync worker.

        Returns NOT_CONFIGURED when the account has no enabled integration;
        that is the normal case for accounts that never turned ERP sync on.
        """
        config = self._integrations.get_active_for_account(account_id)
        if config is None or not config.enabled:
            logger.debug(f"No ERP integration for account {account_id}; skipping {direction.value}")
            return SyncResult(status=SyncStatus.NOT_CONFIGURED)

        logger.info(f"Syncing {direction.value} of employee {employee.employee_id} to {config.endpoint_url}")
        if direction is SyncDirection.CHECK_IN:
            remote_id = self.sync_check_in(config, employee, timestamp)
            return SyncResult(status=SyncStatus.SYNCED, remote_attendance_id=remote_id)

        self.sync_check_out(config, employee, timestamp)
        return SyncResult(status=SyncStatus.SYNCED)

    def test_connection(self, config: SyncConfig) -> ConnectionReport:
        """Authenticate once with a candidate configuration (integration setup screen)."""
        session = self._open_session(config)
        return ConnectionReport(
            endpoint=config.endpoint_url,
            uid=session.uid,
            username=config.username,
            company_id=config.remote_company_id,
        )
