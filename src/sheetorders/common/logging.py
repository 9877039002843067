"""Root logger setup for processes that run sheet syncs."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "SHEETORDERS_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``SHEETORDERS_LOG_LEVEL``) into a numeric level, INFO by default."""

    candidate = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    if candidate is None or candidate == "":
        return logging.INFO
    if isinstance(candidate, int):
        return candidate
    resolved = logging.getLevelNamesMapping().get(candidate.strip().upper())
    if resolved is None:
        raise ValueError(f"Unknown log level: {candidate!r}")
    return resolved


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Initialise the root logger once.

    Later calls are no-ops unless ``force=True``, which tests and long-running
    workers use to reconfigure.
    """

    logging.basicConfig(
        level=resolve_log_level(level),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
