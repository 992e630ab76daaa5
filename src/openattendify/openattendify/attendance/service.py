from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT, SYNC_QUEUE_REFUSED_MESSAGE
from ..core.enums import SyncDirection
from ..core.exceptions import ConflictError, NotFoundError
from ..employees.repository import EmployeeRepository
from ..erp.queue import AttendanceSyncJob, AttendanceSyncQueue
from .model import Attendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in/check-out with one open session per employee.

    The local row is committed first; ERP mirroring is handed to the sync
    queue and can only ever annotate the row afterwards.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        sync_queue: AttendanceSyncQueue | None = None,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._sync_queue = sync_queue
        self._clock = clock

    def _now(self, now: datetime | None) -> datetime:
        # DATETIME columns keep whole seconds.
        return (now or self._clock()).replace(microsecond=0)

    def check_in(self, employee_id: int, *, now: datetime | None = None) -> Attendance:
        now = self._now(now)

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("employee not found")

        if self._attendance.get_active_for_employee(employee_id):
            raise ConflictError("already checked in")

        attendance_id = self._attendance.create_checkin(employee_id=employee_id, check_in=now)
        record = Attendance(attendance_id=attendance_id, employee_id=employee_id, check_in=now)
        logger.info(f"Employee {employee_id} checked in (attendance {attendance_id})")

        self._dispatch_sync(record, SyncDirection.CHECK_IN, now)
        return record

    def check_out(self, employee_id: int, *, now: datetime | None = None) -> Attendance:
        now = self._now(now)

        active = self._attendance.get_active_for_employee(employee_id)
        if not active:
            raise ConflictError("no active session")

        # Another request may have closed the session in between.
        if not self._attendance.close_session(attendance_id=active.attendance_id, check_out=now):
            raise ConflictError("no active session")

        record = replace(active, check_out=now)
        logger.info(f"Employee {employee_id} checked out (attendance {active.attendance_id})")

        self._dispatch_sync(record, SyncDirection.CHECK_OUT, now)
        return record

    def get_active_attendance(self, employee_id: int) -> Optional[Attendance]:
        return self._attendance.get_active_for_employee(employee_id)

    def get_history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[Attendance]:
        return self._attendance.get_recent_for_employee(employee_id, limit)

    def _dispatch_sync(self, record: Attendance, direction: SyncDirection, occurred_at: datetime) -> None:
        if self._sync_queue is None:
            return

        job = AttendanceSyncJob(
            attendance_id=record.attendance_id,
            employee_id=record.employee_id,
            direction=direction,
            occurred_at=occurred_at,
        )
        if not self._sync_queue.enqueue(job):
            logger.warning(f"ERP sync queue refused {direction.value} of attendance {record.attendance_id} not sent")
            self._attendance.set_sync_error(attendance_id=record.attendance_id, message=SYNC_QUEUE_REFUSED_MESSAGE)
