"""
Logging setup for the Evenza API.

``setup_logging`` installs one formatter on the root logger and makes
the uvicorn loggers propagate to it, so server and application records
share a single format and destination.  The AWS SDK loggers are capped
at ``WARNING``; at ``DEBUG`` they would log every signed request.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
NOISY_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")

_HANDLER_NAME = "evenza"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger for the API process.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of a file to append records to, in addition to stderr.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # create_app may run several times per process (tests); attach once.
    if not any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        handlers = [logging.StreamHandler()]
        if logfile:
            handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
        for handler in handlers:
            handler.set_name(_HANDLER_NAME)
            handler.setFormatter(formatter)
            root.addHandler(handler)

    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
