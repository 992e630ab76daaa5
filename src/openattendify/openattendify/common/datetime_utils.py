from __future__ import annotations

from datetime import date, datetime, timezone

from ..core.constants import ERP_TIMESTAMP_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_erp_timestamp(value: datetime) -> str:
    """Render a datetime the way Odoo expects it: UTC, naive, second precision.

    Naive values are taken as local time.
    """
    return value.astimezone(timezone.utc).strftime(ERP_TIMESTAMP_FORMAT)
