import os

from .config import Config, db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

ERP_TIMEOUT_SECONDS = Config.ERP_TIMEOUT_SECONDS
SYNC_QUEUE_MAXSIZE = Config.SYNC_QUEUE_MAXSIZE

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
