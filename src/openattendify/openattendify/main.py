from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.log import setup_console_logging
from .container import Container, ErpSettings, build_container
from .database.bootstrap import apply_schema, list_tables
from .integrations.controller import register as register_integrations
from .tasks.controller import register as register_tasks

logger = logging.getLogger(__name__)


def register_routes(app: Flask, container: Container) -> None:
    app.extensions["openattendify"] = container
    register_attendance(app, container)
    register_tasks(app, container)
    register_integrations(app, container)


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_console_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        logger.info(
            f"settings={settings_module} "
            f"db={db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info(f"schema ready (tables={len(list_tables(db_config))})")

        container = build_container(
            db_config=db_config,
            erp=ErpSettings(
                timeout_s=float(getattr(settings, "ERP_TIMEOUT_SECONDS", ErpSettings.timeout_s)),
                queue_maxsize=int(getattr(settings, "SYNC_QUEUE_MAXSIZE", ErpSettings.queue_maxsize)),
            ),
        )
        atexit.register(container.shutdown)

    register_routes(app, container)
    return app
