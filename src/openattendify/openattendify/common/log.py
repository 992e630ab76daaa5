from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_console_logging(level: str) -> None:
    """Setup basic console logging for the web process and scripts."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
