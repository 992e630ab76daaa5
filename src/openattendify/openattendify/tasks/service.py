from __future__ import annotations

import logging
import re
from dataclasses import replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import TASK_SEQUENCE_DIGITS, TASK_SEQUENCE_PREFIX
from ..core.enums import TaskAction, TaskState
from ..core.exceptions import InvalidActionError, NotFoundError
from ..employees.repository import EmployeeRepository
from .model import Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

_SEQUENCE_RE = re.compile(rf"^{re.escape(TASK_SEQUENCE_PREFIX)}(\d{{{TASK_SEQUENCE_DIGITS}}})$")
_HOURS_QUANTUM = Decimal("0.01")


def compute_total_hours(started_at: datetime, finished_at: datetime) -> Decimal:
    """Elapsed hours rounded half-up to two decimals (never negative)."""
    seconds = max((finished_at - started_at).total_seconds(), 0.0)
    hours = Decimal(str(seconds)) / Decimal(3600)
    return hours.quantize(_HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def next_sequence(last: Optional[str]) -> str:
    number = 1
    if last:
        match = _SEQUENCE_RE.match(last)
        if match:
            number = int(match.group(1)) + 1
    return f"{TASK_SEQUENCE_PREFIX}{number:0{TASK_SEQUENCE_DIGITS}d}"


def transition(task: Task, action: TaskAction, now: datetime) -> Optional[Task]:
    """Return the task after ``action`` or None when nothing changes.

    Forward-only: DRAFT/ASSIGNED -> WORKING -> DONE.
    """
    if action is TaskAction.START:
        if task.state in (TaskState.DRAFT, TaskState.ASSIGNED):
            return replace(task, state=TaskState.WORKING, started_at=task.started_at or now)
        if task.state is TaskState.WORKING and task.started_at is None:
            return replace(task, started_at=now)
        return None

    if action is TaskAction.PAUSE:
        # Pausing keeps the task WORKING and records nothing.
        return None

    if action is TaskAction.FINISH:
        if task.state is TaskState.DONE:
            return None
        started_at = task.started_at or now
        finished_at = max(now, started_at)
        return replace(
            task,
            state=TaskState.DONE,
            finished_at=finished_at,
            total_hours=compute_total_hours(started_at, finished_at),
        )

    raise InvalidActionError(f"invalid action: {action}")


class TaskService:
    def __init__(
        self,
        tasks: TaskRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._tasks = tasks
        self._employees = employees
        self._clock = clock

    def apply_task_action(self, task_id: int, caller_id: int, action: str, *, now: datetime | None = None) -> Task:
        try:
            parsed = TaskAction(action)
        except ValueError:
            raise InvalidActionError(f"invalid action: {action}") from None

        task = self._tasks.get_by_id(task_id)
        # Same answer for "missing" and "someone else's" so task ids do not leak.
        if task is None or task.employee_id != caller_id:
            raise NotFoundError("task not found")

        now = (now or self._clock()).replace(microsecond=0)
        updated = transition(task, parsed, now)
        if updated is None:
            return task

        applied = self._tasks.update_progress(
            task_id=updated.task_id,
            expected_state=task.state,
            expected_started_at=task.started_at,
            state=updated.state,
            started_at=updated.started_at,
            finished_at=updated.finished_at,
            total_hours=updated.total_hours,
        )
        if not applied:
            # A concurrent action moved the task first; its result stands.
            current = self._tasks.get_by_id(task_id)
            logger.info(f"Task {task.sequence} {parsed.value} lost to a concurrent update; keeping {current.state.value}")
            return current

        logger.info(f"Task {task.sequence} {parsed.value}: {task.state.value} -> {updated.state.value}")
        return updated

    def create_task(
        self,
        employee_id: int,
        *,
        name: str,
        project_id: int,
        work_date: date,
        description: Optional[str] = None,
    ) -> Task:
        """Employee self-assigns a new task on one of the account's projects."""
        name = require_non_empty(name, "name")
        description = optional_text(description)

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("employee not found")
        if not self._tasks.project_belongs_to_account(project_id, employee.account_id):
            raise NotFoundError("project not found")

        sequence = next_sequence(self._tasks.get_last_sequence(employee.account_id))
        task_id = self._tasks.create_task(
            account_id=employee.account_id,
            sequence=sequence,
            name=name,
            description=description,
            work_date=work_date,
            project_id=project_id,
            employee_id=employee_id,
            state=TaskState.ASSIGNED,
        )
        return Task(
            task_id=task_id,
            account_id=employee.account_id,
            sequence=sequence,
            name=name,
            description=description,
            work_date=work_date,
            project_id=project_id,
            employee_id=employee_id,
            state=TaskState.ASSIGNED,
        )

    def list_tasks(self, employee_id: int) -> Sequence[Task]:
        return self._tasks.list_for_employee(employee_id)
