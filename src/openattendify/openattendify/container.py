from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.sync_handler import AttendanceSyncHandler
from .core.constants import DEFAULT_ERP_TIMEOUT_SECONDS, DEFAULT_SYNC_QUEUE_MAXSIZE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .erp.queue import AttendanceSyncQueue
from .erp.sync import ErpAttendanceSync
from .integrations.mysql_integration_repository import MySQLIntegrationRepository
from .integrations.repository import IntegrationRepository
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService


@dataclass(frozen=True)
class ErpSettings:
    timeout_s: float = DEFAULT_ERP_TIMEOUT_SECONDS
    queue_maxsize: int = DEFAULT_SYNC_QUEUE_MAXSIZE
    start_worker: bool = True


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    tasks_repo: TaskRepository
    integrations_repo: IntegrationRepository

    erp_sync: ErpAttendanceSync
    sync_queue: AttendanceSyncQueue

    attendance_service: AttendanceService
    task_service: TaskService

    def shutdown(self) -> None:
        """Flush pending ERP sync jobs before the process exits."""
        self.sync_queue.shutdown()


def wire_container(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    tasks_repo: TaskRepository,
    integrations_repo: IntegrationRepository,
    erp: ErpSettings | None = None,
    erp_sync: ErpAttendanceSync | None = None,
) -> Container:
    """Wire services over any repository implementation (MySQL or in-memory)."""
    erp = erp or ErpSettings()
    erp_sync = erp_sync or ErpAttendanceSync(integrations_repo, timeout_s=erp.timeout_s)

    handler = AttendanceSyncHandler(attendance_repo, employees_repo, erp_sync)
    sync_queue = AttendanceSyncQueue(handler, maxsize=erp.queue_maxsize, autostart=erp.start_worker)

    attendance_service = AttendanceService(attendance_repo, employees_repo, sync_queue)
    task_service = TaskService(tasks_repo, employees_repo)

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        tasks_repo=tasks_repo,
        integrations_repo=integrations_repo,
        erp_sync=erp_sync,
        sync_queue=sync_queue,
        attendance_service=attendance_service,
        task_service=task_service,
    )


def build_container(*, db_config: dict, erp: ErpSettings | None = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return wire_container(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        integrations_repo=MySQLIntegrationRepository(conn),
        erp=erp,
    )
