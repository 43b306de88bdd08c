from __future__ import annotations

import logging
import os
from logging import DEBUG, INFO, WARNING  # noqa: F401

LOGGER_NAME = "mpcint"


def level_from_name(name: str, default: int = WARNING) -> int:
    """Numeric level for a level name; unknown names give `default`."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else int(default)


MPCINT_LOGGER = logging.getLogger(LOGGER_NAME)
MPCINT_LOGGER.addHandler(logging.NullHandler())
MPCINT_LOGGER.setLevel(level_from_name(os.environ.get("MPCINT_LOG_LEVEL", "WARNING")))

log = MPCINT_LOGGER.log


def set_log_level(level: int | str) -> None:
    """Change the level of the `mpcint` logger at runtime."""
    MPCINT_LOGGER.setLevel(level_from_name(level) if isinstance(level, str) else int(level))
