from __future__ import annotations

import json
from typing import Optional

from ..core.enums import IntegrationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import SyncConfig
from .repository import IntegrationRepository


class MySQLIntegrationRepository(IntegrationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_for_account(self, account_id: int) -> Optional[SyncConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT configuration
                FROM integrations
                WHERE account_id=%s AND type=%s AND is_active=1
                """,
                (account_id, IntegrationType.ODOO.value),
            )
            row = fetchone(cur)
        if not row:
            return None

        raw = row["configuration"]
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        data = json.loads(raw) if isinstance(raw, str) else dict(raw or {})
        return SyncConfig.from_settings(data)
