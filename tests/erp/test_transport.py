from __future__ import annotations

from unittest.mock import Mock

import pytest
import requests

from src.openattendify.openattendify.core.exceptions import ConnectivityError, ErpRemoteError
from src.openattendify.openattendify.erp.transport import JsonRpcTransport, remote_error_message


def _http_returning(payload=None, *, status_error=None, json_error=None):
    response = Mock()
    response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    http = Mock()
    http.post.return_value = response
    return http


def test_call_posts_jsonrpc_envelope_with_timeout():
    http = _http_returning({"jsonrpc": "2.0", "id": "x", "result": 7})
    transport = JsonRpcTransport("http://odoo.local:8069/", timeout_s=3, http=http)

    result = transport.call("common", "authenticate", "db", "user", "pw", {})

    assert result == 7
    args, kwargs = http.post.call_args
    assert args[0] == "http://odoo.local:8069/jsonrpc"
    assert kwargs["timeout"] == 3.0
    body = kwargs["json"]
    assert body["jsonrpc"] == "2.0"
    assert body["method"] == "call"
    assert body["params"] == {"service": "common", "method": "authenticate", "args": ["db", "user", "pw", {}]}


def test_network_failure_becomes_connectivity_error():
    http = Mock()
    http.post.side_effect = requests.ConnectionError("connection refused")
    transport = JsonRpcTransport("http://odoo.local:8069", http=http)

    with pytest.raises(ConnectivityError) as exc_info:
        transport.call("common", "authenticate")

    assert exc_info.value.endpoint == "http://odoo.local:8069"
    assert "connection refused" in str(exc_info.value)


def test_timeout_becomes_connectivity_error():
    http = Mock()
    http.post.side_effect = requests.Timeout("read timed out")
    transport = JsonRpcTransport("http://odoo.local:8069", http=http)

    with pytest.raises(ConnectivityError):
        transport.call("common", "authenticate")


def test_non_2xx_becomes_connectivity_error():
    http = _http_returning(status_error=requests.HTTPError("502 Bad Gateway"))
    transport = JsonRpcTransport("http://odoo.local:8069", http=http)

    with pytest.raises(ConnectivityError) as exc_info:
        transport.call("object", "execute_kw")

    assert "502" in str(exc_info.value)


def test_malformed_payload_becomes_connectivity_error():
    http = _http_returning(json_error=ValueError("Expecting value"))
    transport = JsonRpcTransport("http://odoo.local:8069", http=http)

    with pytest.raises(ConnectivityError) as exc_info:
        transport.call("object", "execute_kw")

    assert "malformed" in str(exc_info.value)


def test_non_object_payload_is_malformed():
    http = _http_returning(["not", "an", "object"])
    transport = JsonRpcTransport("http://odoo.local:8069", http=http)

    with pytest.raises(ConnectivityError):
        transport.call("object", "execute_kw")


def test_remote_error_member_raises_remote_error_with_data_message():
    http = _http_returning(
        {"jsonrpc": "2.0", "error": {"code": 200, "message": "Odoo Server Error", "data": {"message": "Access Denied"}}}
    )
    transport = JsonRpcTransport("http://odoo.local:8069", http=http)

    with pytest.raises(ErpRemoteError) as exc_info:
        transport.call("object", "execute_kw")

    assert str(exc_info.value) == "Access Denied"


def test_remote_error_message_falls_back_to_top_level_message():
    assert remote_error_message({"message": "Odoo Server Error"}) == "Odoo Server Error"
    assert remote_error_message("boom") == "boom"
