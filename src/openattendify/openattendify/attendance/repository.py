from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Attendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        raise NotImplementedError

    def get_active_for_employee(self, employee_id: int) -> Optional[Attendance]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[Attendance]:
        raise NotImplementedError

    def create_checkin(self, *, employee_id: int, check_in: datetime) -> int:
        """Insert an open session.

        Must raise ConflictError if the employee already has one, atomically
        with the insert.
        """

        raise NotImplementedError

    def close_session(self, *, attendance_id: int, check_out: datetime) -> bool:
        """Set check_out only if the row is still open; False otherwise."""

        raise NotImplementedError

    def set_remote_attendance_id(self, *, attendance_id: int, remote_attendance_id: int) -> bool:
        raise NotImplementedError

    def set_sync_error(self, *, attendance_id: int, message: str) -> bool:
        raise NotImplementedError

    def clear_sync_error(self, *, attendance_id: int) -> bool:
        raise NotImplementedError
