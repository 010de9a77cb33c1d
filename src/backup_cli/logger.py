from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "[%(asctime)s][%(levelname)s] %(name)s: %(message)s"
LOG_FILE_NAME = "backup.log"


def configure_logging(level: str = "INFO", quiet: bool = False) -> None:
    """Configure the root logger for console output.

    With ``quiet`` the console handler only reports errors.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_backup_cli", False):
            root.removeHandler(handler)
            handler.close()

    root.setLevel(_parse_level(level))
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    if quiet:
        console.setLevel(logging.ERROR)
    console._backup_cli = True  # type: ignore[attr-defined]
    root.addHandler(console)


def attach_log_file(log_path: Path) -> Path:
    """Mirror all log output to ``<log_path>/backup.log``."""
    log_file = log_path / LOG_FILE_NAME
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_file.resolve():
            return log_file
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    file_handler._backup_cli = True  # type: ignore[attr-defined]
    root.addHandler(file_handler)
    return log_file


def _parse_level(level: str) -> int:
    value = logging.getLevelName(str(level).upper())
    if isinstance(value, int):
        return value
    return logging.INFO


class Logger:
    """Log sink used by the run loop.

    Messages go through :mod:`logging` and are also kept in memory until
    :meth:`clear` is called, so a caller can inspect what one trigger logged.
    """

    def __init__(self, name: str = "backup_cli") -> None:
        self._log = logging.getLogger(name)
        self._messages: List[str] = []

    @property
    def messages(self) -> List[str]:
        return list(self._messages)

    def message(self, text: str) -> None:
        self._messages.append(text)
        self._log.info(text)

    def error(self, err: BaseException, exc_info: Optional[BaseException] = None) -> None:
        text = str(err)
        self._messages.append(text)
        self._log.error(text)
        if exc_info is not None:
            self._log.debug("Traceback:", exc_info=exc_info)

    def clear(self) -> None:
        self._messages.clear()
