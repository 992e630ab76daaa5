from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Attendance:
    """Domain entity: one work session of an employee.

    ``check_out`` is None while the session is open. ``remote_attendance_id``
    and ``sync_error`` are written later by the ERP sync worker.
    """

    attendance_id: int
    employee_id: int
    check_in: datetime
    check_out: Optional[datetime] = None
    remote_attendance_id: Optional[int] = None
    sync_error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out is None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employeeId": self.employee_id,
            "checkIn": self.check_in.isoformat(),
            "checkOut": self.check_out.isoformat() if self.check_out else None,
            "remoteAttendanceId": self.remote_attendance_id,
            "syncError": self.sync_error,
        }
