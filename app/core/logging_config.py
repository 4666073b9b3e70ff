"""
Logging setup.
Applies the configured level and line format to the root logger at startup.
"""
import logging

import json_log_formatter

from app.config import settings

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def build_formatter(log_format: str) -> logging.Formatter:
    """
    Formatter for the configured ``log_format``.

    ``json`` emits one JSON object per line for log collectors; anything
    else emits a plain text line.
    """
    if log_format.lower() == "json":
        return json_log_formatter.VerboseJSONFormatter()
    return logging.Formatter(TEXT_FORMAT)


def configure_logging() -> None:
    """
    Configure the root logger from settings.

    Noisy Socket.IO/engine.io loggers are kept at WARNING unless debug is on.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(settings.log_format))

    logging.basicConfig(
        level=settings.log_level.upper(),
        handlers=[handler],
        force=True,
    )

    if not settings.debug:
        for name in ("socketio", "engineio", "sqlalchemy.engine"):
            logging.getLogger(name).setLevel(logging.WARNING)
