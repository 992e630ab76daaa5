from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.web import account_required
from ..core.exceptions import ConnectivityError, ErpAuthError, SyncError
from ..container import Container
from .model import SyncConfig

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/integrations/test-odoo", methods=["POST"], endpoint="integration_test_odoo")
    @account_required
    def integration_test_odoo():
        """Check candidate Odoo settings before they are saved.

        Always answers 200 with ``success`` so the settings form can show the reason.
        """
        body = request.get_json(silent=True) or {}
        try:
            config = SyncConfig.from_settings(body)
        except SyncError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        try:
            report = container.erp_sync.test_connection(config)
        except ConnectivityError as e:
            return jsonify({"success": False, "error": f"could not connect to Odoo: {e.cause}"}), 200
        except ErpAuthError:
            return jsonify({"success": False, "error": "invalid credentials; check user, password and database"}), 200
        except SyncError as e:
            logger.warning(f"Odoo connection test failed: {e}")
            return jsonify({"success": False, "error": str(e)}), 200

        return jsonify(
            {
                "success": True,
                "message": "connected to Odoo",
                "details": {
                    "version": "JSON-RPC",
                    "userId": report.uid,
                    "userName": report.username,
                    "companyId": report.company_id,
                },
            }
        ), 200
