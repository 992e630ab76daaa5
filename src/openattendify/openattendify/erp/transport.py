"""JSON-RPC transport to an Odoo endpoint."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol
from uuid import uuid4

import requests

from ..core.constants import DEFAULT_ERP_TIMEOUT_SECONDS
from ..core.exceptions import ConnectivityError, ErpRemoteError

logger = logging.getLogger(__name__)


class RpcTransport(Protocol):
    endpoint: str

    def call(self, service: str, method: str, *args: Any) -> Any:
        raise NotImplementedError


def remote_error_message(error: Any) -> str:
    """Pick the most useful text out of a JSON-RPC error member."""
    if isinstance(error, Mapping):
        data = error.get("data")
        if isinstance(data, Mapping) and data.get("message"):
            return str(data["message"])
        if error.get("message"):
            return str(error["message"])
    return str(error)


class JsonRpcTransport:
    """POSTs ``{"jsonrpc": "2.0", "method": "call", ...}`` to ``<endpoint>/jsonrpc``.

    Holds no state between calls. ``http`` is anything with a
    ``requests``-compatible ``post``; it defaults to the ``requests`` module.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_s: float = DEFAULT_ERP_TIMEOUT_SECONDS,
        http: Optional[Any] = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.timeout_s = float(timeout_s)
        self._http = http if http is not None else requests

    @property
    def url(self) -> str:
        return f"{self.endpoint}/jsonrpc"

    def call(self, service: str, method: str, *args: Any) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "method": "call",
            "params": {"service": service, "method": method, "args": list(args)},
            "id": uuid4().hex,
        }
        logger.debug(f"ERP call {service}.{method} -> {self.url}")

        try:
            response = self._http.post(self.url, json=payload, timeout=self.timeout_s)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise ConnectivityError(self.endpoint, e) from e
        except ValueError as e:
            raise ConnectivityError(self.endpoint, f"malformed response: {e}") from e

        if not isinstance(data, dict):
            raise ConnectivityError(self.endpoint, "malformed response: expected a JSON object")

        error = data.get("error")
        if error:
            raise ErpRemoteError(remote_error_message(error))
        return data.get("result")
