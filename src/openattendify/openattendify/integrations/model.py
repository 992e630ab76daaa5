from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..core.enums import LookupField
from ..core.exceptions import ErpConfigError

# Stored configuration uses the portal's field names; both spellings are accepted.
_LOOKUP_ALIASES = {
    "email": LookupField.EMAIL,
    "dni": LookupField.NATIONAL_ID,
    "nationalid": LookupField.NATIONAL_ID,
    "national_id": LookupField.NATIONAL_ID,
    "codigo": LookupField.CODE,
    "code": LookupField.CODE,
}


@dataclass(frozen=True)
class SyncConfig:
    """Odoo connection settings of one account (read-only for this core)."""

    endpoint_url: str
    database: str
    username: str
    password: str
    employee_lookup_field: LookupField
    remote_company_id: int
    enabled: bool = True

    @classmethod
    def from_settings(cls, data: Mapping[str, Any], *, enabled: bool = True) -> "SyncConfig":
        """Build from the JSON document stored in ``integrations.configuration``."""

        def pick(*keys: str) -> Any:
            for key in keys:
                value = data.get(key)
                if value not in (None, ""):
                    return value
            return None

        url = pick("endpointUrl", "endpoint_url", "url")
        database = pick("database")
        username = pick("username", "usuario")
        password = pick("password", "contrasena")
        lookup_raw = pick("employeeLookupField", "employee_lookup_field", "campoEmpleado") or "email"
        company_raw = pick("remoteCompanyId", "remote_company_id", "companiaId")

        missing = [
            name
            for name, value in (
                ("url", url),
                ("database", database),
                ("username", username),
                ("password", password),
                ("company id", company_raw),
            )
            if value is None
        ]
        if missing:
            raise ErpConfigError(f"ERP integration is missing: {', '.join(missing)}")

        lookup = _LOOKUP_ALIASES.get(str(lookup_raw).strip().lower())
        if lookup is None:
            raise ErpConfigError(f"unsupported employee lookup field: {lookup_raw}")

        try:
            company_id = int(company_raw)
        except (TypeError, ValueError):
            raise ErpConfigError(f"invalid ERP company id: {company_raw}") from None

        endpoint = str(url).rstrip("/")
        port = pick("port", "puerto")
        if port is not None:
            endpoint = f"{endpoint}:{port}"

        return cls(
            endpoint_url=endpoint,
            database=str(database),
            username=str(username),
            password=str(password),
            employee_lookup_field=lookup,
            remote_company_id=company_id,
            enabled=enabled,
        )
