from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as the attendance core sees it.

    Note: ``account_id`` is the owner of the employee's company; it keys the
    ERP integration and the task sequence.
    """

    employee_id: int
    account_id: int
    full_name: str
    code: str
    national_id: str
    email: Optional[str] = None
    is_active: bool = True
