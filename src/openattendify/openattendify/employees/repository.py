from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee


class EmployeeRepository(Protocol):
    """Read-only access to employees; CRUD lives outside the attendance core."""

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError
