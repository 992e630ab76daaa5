from __future__ import annotations

from datetime import datetime
from unittest.mock import Mock

from src.openattendify.openattendify.attendance.service import AttendanceService
from src.openattendify.openattendify.attendance.sync_handler import AttendanceSyncHandler
from src.openattendify.openattendify.core.exceptions import ConnectivityError, ErpRemoteError
from src.openattendify.openattendify.erp.queue import AttendanceSyncQueue
from src.openattendify.openattendify.erp.sync import ErpAttendanceSync
from tests.fakes import (
    FakeTransport,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryIntegrations,
    happy_routes,
    make_employee,
    make_sync_config,
    single_transport_factory,
)


def _wire(configs, transport_factory):
    attendance = InMemoryAttendance()
    employees = InMemoryEmployees({1: make_employee(1, account_id=100)})
    erp_sync = ErpAttendanceSync(InMemoryIntegrations(configs), transport_factory=transport_factory)
    queue = AttendanceSyncQueue(AttendanceSyncHandler(attendance, employees, erp_sync), autostart=False)
    return AttendanceService(attendance, employees, queue), attendance, queue


def _unreachable(endpoint):
    transport = Mock()
    transport.endpoint = endpoint
    transport.call.side_effect = ConnectivityError(endpoint, "connection refused")
    return transport


def test_no_integration_leaves_sync_columns_empty():
    svc, repo, queue = _wire({}, _unreachable)

    record = svc.check_in(1, now=datetime(2026, 3, 2, 8, 0, 0))
    svc.check_out(1, now=datetime(2026, 3, 2, 17, 0, 0))
    queue.drain()

    row = repo.get_by_id(record.attendance_id)
    assert row.sync_error is None
    assert row.remote_attendance_id is None
    assert row.check_out == datetime(2026, 3, 2, 17, 0, 0)


def test_unreachable_endpoint_records_error_and_keeps_local_check_in():
    configs = {100: make_sync_config(endpoint_url="http://10.255.255.1:8069")}
    svc, repo, queue = _wire(configs, _unreachable)

    record = svc.check_in(1, now=datetime(2026, 3, 2, 8, 0, 0))
    queue.drain()

    row = repo.get_by_id(record.attendance_id)
    assert row.check_out is None
    assert row.remote_attendance_id is None
    assert "10.255.255.1" in row.sync_error


def test_successful_check_in_stores_remote_id():
    transport = FakeTransport(happy_routes())
    svc, repo, queue = _wire({100: make_sync_config()}, single_transport_factory(transport))

    record = svc.check_in(1, now=datetime(2026, 3, 2, 8, 0, 0))
    assert record.remote_attendance_id is None
    queue.drain()

    row = repo.get_by_id(record.attendance_id)
    assert row.remote_attendance_id == 901
    assert row.sync_error is None


def test_check_out_drift_is_recorded_but_session_stays_closed():
    transport = FakeTransport(happy_routes(**{"hr.attendance:search_read": []}))
    svc, repo, queue = _wire({100: make_sync_config()}, single_transport_factory(transport))

    record = svc.check_in(1, now=datetime(2026, 3, 2, 8, 0, 0))
    svc.check_out(1, now=datetime(2026, 3, 2, 17, 0, 0))
    queue.drain()

    row = repo.get_by_id(record.attendance_id)
    assert row.check_out == datetime(2026, 3, 2, 17, 0, 0)
    assert row.remote_attendance_id == 901
    assert "no open ERP attendance" in row.sync_error
    assert svc.get_active_attendance(1) is None


def test_unexpected_failure_is_recorded():
    erp_sync = Mock()
    erp_sync.sync_attendance.side_effect = KeyError("id")
    attendance = InMemoryAttendance()
    employees = InMemoryEmployees({1: make_employee(1)})
    queue = AttendanceSyncQueue(AttendanceSyncHandler(attendance, employees, erp_sync), autostart=False)
    svc = AttendanceService(attendance, employees, queue)

    record = svc.check_in(1, now=datetime(2026, 3, 2, 8, 0, 0))
    queue.drain()

    assert attendance.get_by_id(record.attendance_id).sync_error.startswith("unexpected sync failure")


def test_successful_check_out_clears_earlier_failure():
    transport = FakeTransport(happy_routes(**{"hr.attendance:create": ErpRemoteError("Access denied")}))
    svc, repo, queue = _wire({100: make_sync_config()}, single_transport_factory(transport))

    record = svc.check_in(1, now=datetime(2026, 3, 2, 8, 0, 0))
    queue.drain()
    assert repo.get_by_id(record.attendance_id).sync_error == "Access denied"

    svc.check_out(1, now=datetime(2026, 3, 2, 17, 0, 0))
    queue.drain()

    row = repo.get_by_id(record.attendance_id)
    assert row.sync_error is None
    assert row.remote_attendance_id is None
