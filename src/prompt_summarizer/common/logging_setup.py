"""Logging configuration shared by the server and the CLI client."""
from __future__ import annotations
import logging
import sys

DIAGNOSTIC_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

# httpx/httpcore log every outbound request at INFO.
CHATTY_LOGGERS = ("httpx", "httpcore")

def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Send all records to stderr, the process's diagnostic stream.

    Replaces any handlers already on the root logger, so calling it again
    (e.g. from ``create_app``) does not duplicate output. HTTP client
    loggers are held at WARNING unless ``level`` is DEBUG.

    Args:
        level: Logging level, as a number or a name like "debug".
    """
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(DIAGNOSTIC_FORMAT))
    root.handlers[:] = [handler]

    chatty_level = logging.DEBUG if root.level <= logging.DEBUG else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)
