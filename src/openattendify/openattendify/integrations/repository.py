from __future__ import annotations

from typing import Optional, Protocol

from .model import SyncConfig


class IntegrationRepository(Protocol):
    def get_active_for_account(self, account_id: int) -> Optional[SyncConfig]:
        """Return the enabled Odoo integration of the account, or None."""

        raise NotImplementedError
