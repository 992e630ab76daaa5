from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import TaskState
from .model import Task


class TaskRepository(Protocol):
    def get_by_id(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[Task]:
        raise NotImplementedError

    def get_last_sequence(self, account_id: int) -> Optional[str]:
        raise NotImplementedError

    def project_belongs_to_account(self, project_id: int, account_id: int) -> bool:
        raise NotImplementedError

    def create_task(
        self,
        *,
        account_id: int,
        sequence: str,
        name: str,
        description: Optional[str],
        work_date: date,
        project_id: int,
        employee_id: Optional[int],
        state: TaskState,
    ) -> int:
        raise NotImplementedError

    def update_progress(
        self,
        *,
        task_id: int,
        expected_state: TaskState,
        expected_started_at: Optional[datetime],
        state: TaskState,
        started_at: Optional[datetime],
        finished_at: Optional[datetime],
        total_hours: Optional[Decimal],
    ) -> bool:
        """Write the new progress only if the row still matches the state it was read in; False otherwise."""

        raise NotImplementedError
