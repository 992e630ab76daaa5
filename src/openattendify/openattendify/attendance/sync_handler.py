from __future__ import annotations

import logging

from ..core.enums import SyncDirection, SyncStatus
from ..core.exceptions import SyncError
from ..employees.repository import EmployeeRepository
from ..erp.queue import AttendanceSyncJob
from ..erp.sync import ErpAttendanceSync
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceSyncHandler:
    """Consumes sync jobs and writes the outcome back onto the attendance row.

    Second phase of the check-in/check-out write: it only ever touches
    ``remote_attendance_id`` and ``sync_error``.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository, erp_sync: ErpAttendanceSync):
        self._attendance = attendance
        self._employees = employees
        self._erp_sync = erp_sync

    def __call__(self, job: AttendanceSyncJob) -> None:
        employee = self._employees.get_by_id(job.employee_id)
        if employee is None:
            self._record_error(job, "employee not found")
            return

        try:
            result = self._erp_sync.sync_attendance(employee.account_id, employee, job.direction, job.occurred_at)
        except SyncError as e:
            logger.warning(f"ERP {job.direction.value} sync failed for attendance {job.attendance_id}: {e}")
            self._record_error(job, str(e))
            return
        except Exception as e:
            logger.exception(f"Unexpected ERP sync failure for attendance {job.attendance_id}")
            self._record_error(job, f"unexpected sync failure: {e}")
            return

        if result.status is SyncStatus.NOT_CONFIGURED:
            return

        # sync_error always reflects the latest attempt.
        if job.direction is SyncDirection.CHECK_IN and result.remote_attendance_id is not None:
            self._attendance.set_remote_attendance_id(
                attendance_id=job.attendance_id,
                remote_attendance_id=result.remote_attendance_id,
            )
        else:
            self._attendance.clear_sync_error(attendance_id=job.attendance_id)

    def _record_error(self, job: AttendanceSyncJob, message: str) -> None:
        self._attendance.set_sync_error(attendance_id=job.attendance_id, message=message)
