from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..core.exceptions import ErpAuthError, ErpRemoteError
from ..integrations.model import SyncConfig
from .transport import RpcTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteSession:
    """Authenticated identity for one sync attempt. Never cached."""

    transport: RpcTransport
    database: str
    uid: int
    password: str

    def execute_kw(self, model: str, action: str, args: list, kwargs: Optional[dict] = None) -> Any:
        call_args: list[Any] = [self.database, self.uid, self.password, model, action, args]
        if kwargs is not None:
            call_args.append(kwargs)
        return self.transport.call("object", "execute_kw", *call_args)


class ErpAuthenticator:
    def authenticate(self, config: SyncConfig, transport: RpcTransport) -> RemoteSession:
        """Exchange the configured credentials for a uid.

        ConnectivityError from the transport propagates untouched.
        """
        try:
            uid = transport.call("common", "authenticate", config.database, config.username, config.password, {})
        except ErpRemoteError as e:
            logger.warning(f"ERP rejected authentication for {config.username}@{config.database}: {e}")
            raise ErpAuthError("invalid credentials") from e

        # Odoo answers False for bad credentials; bool is an int subclass.
        if isinstance(uid, bool) or not isinstance(uid, int) or uid <= 0:
            raise ErpAuthError("invalid credentials")

        logger.debug(f"Authenticated on ERP {transport.endpoint} as uid={uid}")
        return RemoteSession(transport=transport, database=config.database, uid=uid, password=config.password)
