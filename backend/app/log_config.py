import logging
import sys

from app.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> None:
    """Configure root logging once at startup; DEBUG wins when APP_DEBUG is set."""
    settings = get_settings()
    level = logging.DEBUG if settings.APP_DEBUG else logging.getLevelName(settings.LOG_LEVEL.upper())
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
