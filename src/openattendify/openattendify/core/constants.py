"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 20
DEFAULT_ERP_TIMEOUT_SECONDS = 10.0
DEFAULT_SYNC_QUEUE_MAXSIZE = 1000

ERP_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
ERP_EMPLOYEE_CODE_FIELD = "x_employee_code"

TASK_SEQUENCE_PREFIX = "TAR-"
TASK_SEQUENCE_DIGITS = 5

SYNC_QUEUE_REFUSED_MESSAGE = "ERP sync queue refused the event (full or shutting down); it was not sent"
