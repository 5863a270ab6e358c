"""
Logging setup shared by every entry point that embeds the gateway.
"""

import logging
from typing import Optional

from lightbnb.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging at the configured level."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # SQL statements are echoed by the engine itself when debug is on
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.debug else logging.WARNING)
    logging.getLogger(__name__).debug(f"Logging configured at level {logging.getLevelName(level)}")
