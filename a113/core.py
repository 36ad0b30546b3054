"""Per-component loggers and library initialisation."""

from __future__ import annotations

import logging
import socket
import sys
import threading
from enum import Enum, IntFlag
from typing import Dict, Optional, Sequence

VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 3
VERSION_STRING = "a113v1.0.3"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOG_FORMAT = "[%(levelname)s] [%(asctime)s] [%(name)s] - %(message)s"


class LogComponent(Enum):
    """Library components that each log under their own name."""

    GENERAL = ""
    IO = "--I/O"
    IMM = "--IMM"
    SCT = "--SCT"

    @property
    def logger_name(self) -> str:
        return VERSION_STRING + self.value


class InitFlags(IntFlag):
    NONE = 0
    SOCKETS = 1


class _LowerLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        copy = logging.makeLogRecord(record.__dict__)
        copy.levelname = record.levelname.lower()
        return super().format(copy)


_loggers: Dict[LogComponent, logging.Logger] = {}
_loggers_lock = threading.Lock()


def get_logger(component: LogComponent) -> logging.Logger:
    """Return the logger of ``component``, setting it up on first use."""
    component = LogComponent(component)
    with _loggers_lock:
        logger = _loggers.get(component)
        if logger is None:
            logger = logging.getLogger(component.logger_name)
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(_LowerLevelFormatter(_LOG_FORMAT, _DATE_FORMAT))
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)
            logger.propagate = False
            _loggers[component] = logger
        return logger


def set_log_level(component: LogComponent, level: int) -> None:
    """Set the level of one component's logger."""
    get_logger(component).setLevel(level)


def _init_sockets(log: logging.Logger) -> bool:
    log.debug("Initializing input/output sockets...")
    try:
        probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as exc:
        log.error("Flawed socket startup, [%s].", exc)
        log.warning("Flawed initialization of input/output sockets.")
        return False
    probe.close()
    log.info("Initialization of input/output sockets completed.")
    return True


def init(argv: Optional[Sequence[str]] = None, flags: InitFlags = InitFlags.NONE) -> int:
    """Initialise the library and return the number of warnings raised."""
    log = get_logger(LogComponent.GENERAL)
    log.info(
        "Hello there from AUTO-A113, version %d.%d.%d. Initializing the operating system plate...",
        VERSION_MAJOR,
        VERSION_MINOR,
        VERSION_PATCH,
    )
    warn_count = 0
    if flags & InitFlags.SOCKETS and not _init_sockets(log):
        warn_count += 1

    if warn_count == 0:
        log.info("Initialization of the operating system plate completed flawlessly.")
    else:
        log.warning(
            "Initialization of the operating system plate completed with %d warnings.",
            warn_count,
        )
    return warn_count