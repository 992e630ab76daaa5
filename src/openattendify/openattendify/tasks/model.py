from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import TaskState


@dataclass(frozen=True)
class Task:
    """Domain entity: a unit of project work tracked by state and elapsed time.

    ``total_hours`` is only set once the task is DONE.
    """

    task_id: int
    account_id: int
    sequence: str
    name: str
    project_id: int
    work_date: date
    state: TaskState
    employee_id: Optional[int] = None
    description: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    total_hours: Optional[Decimal] = None

    def to_dict(self) -> dict:
        return {
            "id": self.task_id,
            "sequence": self.sequence,
            "name": self.name,
            "description": self.description,
            "date": self.work_date.isoformat(),
            "projectId": self.project_id,
            "employeeId": self.employee_id,
            "state": self.state.value,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "finishedAt": self.finished_at.isoformat() if self.finished_at else None,
            "totalHours": float(self.total_hours) if self.total_hours is not None else None,
        }
