from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.openattendify.openattendify.core.enums import LookupField, SyncDirection, SyncStatus
from src.openattendify.openattendify.core.exceptions import (
    ConnectivityError,
    ErpAuthError,
    ErpConfigError,
    ErpNotFoundError,
    ErpRemoteError,
)
from src.openattendify.openattendify.erp.auth import ErpAuthenticator
from src.openattendify.openattendify.erp.resolver import EmployeeResolver
from src.openattendify.openattendify.erp.sync import ErpAttendanceSync
from tests.fakes import (
    FakeTransport,
    InMemoryIntegrations,
    happy_routes,
    make_employee,
    make_sync_config,
    single_transport_factory,
)

CHECK_IN_AT = datetime(2026, 3, 2, 13, 5, 9, tzinfo=timezone.utc)


def _sync(transport: FakeTransport, configs=None) -> ErpAttendanceSync:
    integrations = InMemoryIntegrations(configs if configs is not None else {100: make_sync_config()})
    return ErpAttendanceSync(integrations, transport_factory=single_transport_factory(transport))


# --- authentication ---------------------------------------------------------


def test_authenticate_returns_session_with_uid():
    transport = FakeTransport(happy_routes())
    session = ErpAuthenticator().authenticate(make_sync_config(), transport)

    assert session.uid == 2
    assert transport.calls[0] == ("common", "authenticate", ("prod", "sync@example.com", "secret", {}))


@pytest.mark.parametrize("uid", [False, 0, None])
def test_authenticate_rejects_empty_identity(uid):
    transport = FakeTransport({("common", "authenticate"): uid})

    with pytest.raises(ErpAuthError, match="invalid credentials"):
        ErpAuthenticator().authenticate(make_sync_config(), transport)


def test_authenticate_maps_remote_fault_to_auth_error():
    transport = FakeTransport({("common", "authenticate"): ErpRemoteError("database prod does not exist")})

    with pytest.raises(ErpAuthError):
        ErpAuthenticator().authenticate(make_sync_config(), transport)


def test_authenticate_lets_connectivity_error_through():
    transport = FakeTransport({("common", "authenticate"): ConnectivityError("http://odoo.local:8069", "refused")})

    with pytest.raises(ConnectivityError):
        ErpAuthenticator().authenticate(make_sync_config(), transport)


# --- employee resolution ----------------------------------------------------


@pytest.mark.parametrize(
    "lookup, remote_field, expected_value",
    [
        (LookupField.EMAIL, "work_email", "ana@example.com"),
        (LookupField.NATIONAL_ID, "identification_id", "40123456"),
        (LookupField.CODE, "x_employee_code", "EMP-001"),
    ],
)
def test_resolver_searches_by_configured_field(lookup, remote_field, expected_value):
    transport = FakeTransport(happy_routes())
    config = make_sync_config(employee_lookup_field=lookup, remote_company_id=3)
    session = ErpAuthenticator().authenticate(config, transport)

    remote_id = EmployeeResolver().resolve(config, session, make_employee())

    assert remote_id == 55
    args = transport.execute_calls("hr.employee", "search_read")[0]
    domain = args[5][0]
    assert domain == [[remote_field, "=", expected_value], ["company_id", "=", 3], ["active", "=", True]]
    assert args[6]["limit"] == 1


def test_resolver_requires_local_lookup_value():
    transport = FakeTransport(happy_routes())
    config = make_sync_config()
    session = ErpAuthenticator().authenticate(config, transport)

    with pytest.raises(ErpConfigError, match="missing lookup value"):
        EmployeeResolver().resolve(config, session, make_employee(email=None))

    assert transport.execute_calls("hr.employee", "search_read") == []


def test_resolver_not_found_carries_diagnostics():
    transport = FakeTransport(happy_routes(**{"hr.employee:search_read": []}))
    config = make_sync_config(remote_company_id=9)
    session = ErpAuthenticator().authenticate(config, transport)

    with pytest.raises(ErpNotFoundError) as exc_info:
        EmployeeResolver().resolve(config, session, make_employee())

    err = exc_info.value
    assert "employee not found in ERP" in str(err)
    assert err.details == {"field": "work_email", "value": "ana@example.com", "company": 9}


# --- check-in / check-out ---------------------------------------------------


def test_sync_check_in_creates_remote_attendance():
    transport = FakeTransport(happy_routes())
    sync = _sync(transport)

    remote_id = sync.sync_check_in(make_sync_config(), make_employee(), CHECK_IN_AT)

    assert remote_id == 901
    args = transport.execute_calls("hr.attendance", "create")[0]
    assert args[5] == [{"employee_id": 55, "check_in": "2026-03-02 13:05:09"}]


def test_sync_check_in_accepts_list_result_from_newer_odoo():
    transport = FakeTransport(happy_routes(**{"hr.attendance:create": [902]}))

    assert _sync(transport).sync_check_in(make_sync_config(), make_employee(), CHECK_IN_AT) == 902


def test_sync_check_out_closes_latest_open_remote_row():
    transport = FakeTransport(happy_routes())
    check_out_at = datetime(2026, 3, 2, 21, 0, 0, tzinfo=timezone.utc)

    assert _sync(transport).sync_check_out(make_sync_config(), make_employee(), check_out_at) is True

    search = transport.execute_calls("hr.attendance", "search_read")[0]
    assert search[5] == [[["employee_id", "=", 55], ["check_out", "=", False]]]
    assert search[6] == {"fields": ["id"], "limit": 1, "order": "check_in desc"}
    write = transport.execute_calls("hr.attendance", "write")[0]
    assert write[5] == [[901], {"check_out": "2026-03-02 21:00:00"}]


def test_sync_check_out_without_open_remote_row_is_not_found():
    transport = FakeTransport(happy_routes(**{"hr.attendance:search_read": []}))

    with pytest.raises(ErpNotFoundError, match="no open ERP attendance"):
        _sync(transport).sync_check_out(make_sync_config(), make_employee(), CHECK_IN_AT)

    assert transport.execute_calls("hr.attendance", "write") == []


def test_each_attempt_authenticates_again():
    transport = FakeTransport(happy_routes())
    sync = _sync(transport)

    sync.sync_attendance(100, make_employee(), SyncDirection.CHECK_IN, CHECK_IN_AT)
    sync.sync_attendance(100, make_employee(), SyncDirection.CHECK_OUT, CHECK_IN_AT)

    auth_calls = [c for c in transport.calls if c[:2] == ("common", "authenticate")]
    assert len(auth_calls) == 2


# --- top-level entry --------------------------------------------------------


def test_sync_attendance_without_integration_is_not_configured():
    transport = FakeTransport(happy_routes())

    result = _sync(transport, configs={}).sync_attendance(100, make_employee(), SyncDirection.CHECK_IN, CHECK_IN_AT)

    assert result.status is SyncStatus.NOT_CONFIGURED
    assert result.remote_attendance_id is None
    assert transport.calls == []


def test_sync_attendance_with_disabled_integration_is_not_configured():
    transport = FakeTransport(happy_routes())
    configs = {100: make_sync_config(enabled=False)}

    result = _sync(transport, configs=configs).sync_attendance(
        100, make_employee(), SyncDirection.CHECK_IN, CHECK_IN_AT
    )

    assert result.status is SyncStatus.NOT_CONFIGURED


def test_sync_attendance_check_in_returns_remote_id():
    result = _sync(FakeTransport(happy_routes())).sync_attendance(
        100, make_employee(), SyncDirection.CHECK_IN, CHECK_IN_AT
    )

    assert result.status is SyncStatus.SYNCED
    assert result.remote_attendance_id == 901


def test_sync_attendance_propagates_typed_errors():
    transport = FakeTransport({("common", "authenticate"): False})

    with pytest.raises(ErpAuthError):
        _sync(transport).sync_attendance(100, make_employee(), SyncDirection.CHECK_OUT, CHECK_IN_AT)


def test_sync_uses_endpoint_from_config():
    transport = FakeTransport(happy_routes())
    configs = {100: make_sync_config(endpoint_url="https://erp.example.com:8443")}

    _sync(transport, configs=configs).sync_attendance(100, make_employee(), SyncDirection.CHECK_IN, CHECK_IN_AT)

    assert transport.endpoint == "https://erp.example.com:8443"


def test_test_connection_reports_identity():
    report = _sync(FakeTransport(happy_routes())).test_connection(make_sync_config(remote_company_id=4))

    assert report.uid == 2
    assert report.username == "sync@example.com"
    assert report.company_id == 4
