"""Logging setup for command-line use.

Library modules only create module-level loggers; handlers are attached here
by the CLI.
"""

import logging
import os

LOG_LEVEL_ENV_VAR = "TOPOSONICS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def resolve_log_level(level: str | int | None = None) -> int:
    """Resolve a level name or number, falling back to the environment.

    Unknown names resolve to INFO.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | int | None = None) -> int:
    """Configure the root logger with a stream handler.

    Args:
        level: Level name ("DEBUG", "info", ...) or number; None reads
            ``TOPOSONICS_LOG_LEVEL``.

    Returns:
        The numeric level that was applied.
    """
    resolved = resolve_log_level(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=True)
    return resolved
