import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "DC_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def resolve_level(name: Optional[str], default_level: int) -> int:
    """Level for a name such as "debug" or "10"; unknown names fall back to the default."""
    if not name:
        return default_level
    name = name.strip()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default_level


def configure_logging(default_level: int = logging.INFO) -> int:
    """Set up console logging for the CLI and return the level in effect.

    DC_LOG_LEVEL overrides ``default_level``. The level is also set on the
    ``dungeon_crawler`` logger so it applies when the root logger was already
    configured by the host application.
    """
    level = resolve_level(os.getenv(LOG_LEVEL_ENV), default_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("dungeon_crawler").setLevel(level)
    return level
