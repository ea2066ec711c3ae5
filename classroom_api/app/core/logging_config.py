"""
Logging setup for the classroom API.

Application modules log through ``logging.getLogger(__name__)``, so
every record lands under the ``classroom_api`` logger.  The level
from ``LOG_LEVEL`` is applied to that logger on every call.  Root
handlers are only attached when nothing else (uvicorn, pytest) has
configured logging already.
"""

import logging
from pathlib import Path
from typing import Optional

APP_LOGGER = "classroom_api"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> logging.Logger:
    """Set the application log level and attach handlers if needed.

    Returns the ``classroom_api`` logger.  Unknown level names fall
    back to ``INFO``.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(numeric_level)

    root = logging.getLogger()
    if root.handlers:
        return app_logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    return app_logger
