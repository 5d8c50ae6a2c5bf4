from __future__ import annotations
import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOGGER_NAME = "supplychain_guard"


def resolve_level(level: str | int) -> int:
    """Map a level name or number to a logging level; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(name: str = LOGGER_NAME, level: str | int = logging.INFO) -> logging.Logger:
    """Return the shared console logger, attaching its handler only once.

    Streamlit re-executes the script on every interaction, so the handler guard
    keeps log lines from multiplying.
    """
    log = logging.getLogger(name)
    log.setLevel(resolve_level(level))
    if log.handlers:
        return log
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    log.addHandler(handler)
    log.propagate = False
    return log


logger = setup_logger()
