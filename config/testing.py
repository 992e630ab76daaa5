import os

from .config import db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env()

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

# Short timeout so a test never hangs on an ERP endpoint.
ERP_TIMEOUT_SECONDS = 2.0
SYNC_QUEUE_MAXSIZE = 100

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
