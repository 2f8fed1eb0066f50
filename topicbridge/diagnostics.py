"""Append-only diagnostics log shared by the connector operations.

Each line looks like ``<timestamp>   (<pid>)   <message>`` and goes to
``<hostname>.topicbridge.log`` inside the configured directory, rotated at
midnight. A missing or invalid directory falls back to the system temp dir.
Writing never raises: open/write failures are reported on stderr by the
logging machinery and the calling operation carries on.
"""

import logging
import os
import socket
import sys
import tempfile
import threading
from logging.handlers import TimedRotatingFileHandler
from typing import Dict, Optional

from . import config

LOG_FORMAT = "%(asctime)s   (%(process)d)   %(message)s"


def _level(name) -> int:
    level = logging.getLevelName(str(name).upper())
    if isinstance(level, int):
        return level
    print(f"Log error: unknown log level {name!r}, using INFO", file=sys.stderr)
    return logging.INFO


_sinks: Dict[str, "DiagnosticsSink"] = {}
_lock = threading.Lock()


def resolve_log_dir(path: Optional[str]) -> str:
    if path and os.path.isdir(path):
        return os.path.abspath(path)
    return tempfile.gettempdir()


def log_file_name() -> str:
    return f"{socket.gethostname()}.topicbridge.log"


class DiagnosticsSink:
    def __init__(self, directory: str):
        self.directory = directory
        self.path = os.path.join(directory, log_file_name())
        self._logger = logging.getLogger(f"topicbridge.diagnostics[{directory}]")
        self._logger.setLevel(_level(config.LOG_LEVEL))
        self._logger.propagate = False

        if not self._logger.handlers:
            self._logger.addHandler(self._make_handler())

    def _make_handler(self) -> logging.Handler:
        try:
            handler = TimedRotatingFileHandler(
                self.path,
                when="midnight",
                encoding="utf-8",
                delay=True,
            )
        except OSError as e:
            print(f"Log error: {e!r}", file=sys.stderr)
            return logging.NullHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        return handler

    def log(self, message: str, level: int = logging.INFO) -> None:
        self._logger.log(level, message)

    def error(self, message: str) -> None:
        self.log(message, logging.ERROR)


def get_sink(path: Optional[str] = None) -> DiagnosticsSink:
    directory = resolve_log_dir(path if path is not None else config.LOG_PATH)
    with _lock:
        sink = _sinks.get(directory)
        if sink is None:
            sink = _sinks[directory] = DiagnosticsSink(directory)
    return sink


def log(path: Optional[str], message: str) -> None:
    get_sink(path).log(message)
