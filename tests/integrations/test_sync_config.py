from __future__ import annotations

import pytest

from src.openattendify.openattendify.core.enums import LookupField
from src.openattendify.openattendify.core.exceptions import ErpConfigError
from src.openattendify.openattendify.integrations.model import SyncConfig


def test_from_portal_settings():
    config = SyncConfig.from_settings(
        {
            "url": "http://odoo.local/",
            "puerto": "8069",
            "database": "prod",
            "usuario": "sync@example.com",
            "contrasena": "secret",
            "campoEmpleado": "dni",
            "companiaId": "3",
        }
    )

    assert config.endpoint_url == "http://odoo.local:8069"
    assert config.username == "sync@example.com"
    assert config.password == "secret"
    assert config.employee_lookup_field is LookupField.NATIONAL_ID
    assert config.remote_company_id == 3
    assert config.enabled is True


def test_from_settings_with_explicit_endpoint_and_default_lookup():
    config = SyncConfig.from_settings(
        {
            "endpointUrl": "https://erp.example.com",
            "database": "prod",
            "username": "u",
            "password": "p",
            "remoteCompanyId": 1,
        }
    )

    assert config.endpoint_url == "https://erp.example.com"
    assert config.employee_lookup_field is LookupField.EMAIL


@pytest.mark.parametrize("raw, expected", [("codigo", LookupField.CODE), ("nationalId", LookupField.NATIONAL_ID)])
def test_lookup_aliases(raw, expected):
    config = SyncConfig.from_settings(
        {"url": "http://x", "database": "d", "usuario": "u", "contrasena": "p", "companiaId": 1, "campoEmpleado": raw}
    )

    assert config.employee_lookup_field is expected


def test_missing_values_are_config_errors():
    with pytest.raises(ErpConfigError, match="password"):
        SyncConfig.from_settings({"url": "http://x", "database": "d", "usuario": "u", "companiaId": 1})


def test_bad_company_id_is_config_error():
    with pytest.raises(ErpConfigError, match="company"):
        SyncConfig.from_settings(
            {"url": "http://x", "database": "d", "usuario": "u", "contrasena": "p", "companiaId": "abc"}
        )


def test_unknown_lookup_field_is_config_error():
    with pytest.raises(ErpConfigError, match="lookup"):
        SyncConfig.from_settings(
            {"url": "http://x", "database": "d", "usuario": "u", "contrasena": "p", "companiaId": 1, "campoEmpleado": "phone"}
        )
