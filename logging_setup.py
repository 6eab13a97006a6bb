from __future__ import annotations

import logging
import os
from typing import Any, Optional


def _parse_level(level_text: Optional[str]) -> Optional[int]:
    if not level_text:
        return None
    value = str(level_text).strip().upper()
    if not value:
        return None
    mapping = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
    }
    return mapping.get(value)


def setup_logging(args: Any = None, *, config_level: Optional[str] = None, name: str = "lanebeat") -> None:
    """Configure python logging once.

    Priority (highest first):
    - env LANEBEAT_LOG_LEVEL
    - CLI flag --log-level (if present on args)
    - config file logging.level
    - default: INFO
    """

    root = logging.getLogger()
    if root.handlers:
        return

    level = logging.INFO
    for candidate in (
        config_level,
        getattr(args, "log_level", None) if args is not None else None,
        os.environ.get("LANEBEAT_LOG_LEVEL"),
    ):
        parsed = _parse_level(candidate)
        if parsed is not None:
            level = parsed

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt = "%H:%M:%S"

    logging.basicConfig(level=level, format=fmt, datefmt=datefmt)

    logging.getLogger(name).debug("logging initialized (level=%s)", logging.getLevelName(level))
