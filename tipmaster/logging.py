import logging

from .config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(settings: Settings) -> None:
    """Configure application-wide logging based on settings.

    The format includes timestamp, log level, logger name, and message.
    """
    log_level_name = settings.log_level.upper()
    level = getattr(logging, log_level_name, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("tipmaster").setLevel(level)

    # asyncio reports slow callbacks and unretrieved task errors at DEBUG/ERROR.
    logging.getLogger("asyncio").setLevel(max(level, logging.WARNING))
