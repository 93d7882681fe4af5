import logging
import sys
from logging.handlers import RotatingFileHandler
from . import settings

LOG_FILENAME = "meat_inventory.log"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str = None, log_level: int | None = None) -> logging.Logger:
    """
    Configures console output (bare messages, the report progress a user reads)
    and a rotating log file under settings.LOG_DIR (timestamped, for audits).
    The level defaults to settings.LOG_LEVEL.
    """
    if log_level is None:
        log_level = logging.getLevelName(settings.LOG_LEVEL)
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Configure once per process
    if any(getattr(h, "_meat_inventory", False) for h in logger.handlers):
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))

    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        settings.LOG_DIR / LOG_FILENAME,
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

    for handler in (console_handler, file_handler):
        handler._meat_inventory = True
        logger.addHandler(handler)

    # urllib3 logs every request at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logger
