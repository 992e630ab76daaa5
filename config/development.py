import os

from .config import Config, db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

ERP_TIMEOUT_SECONDS = Config.ERP_TIMEOUT_SECONDS
SYNC_QUEUE_MAXSIZE = Config.SYNC_QUEUE_MAXSIZE

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
