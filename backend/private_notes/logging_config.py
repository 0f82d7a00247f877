import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER = "private_notes"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_FILE_SIZE = 10 * 1024 * 1024
BACKUP_COUNT = 5


def configure_logging(level: str = "INFO", log_file: Optional[Union[str, Path]] = None) -> None:
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.handlers.clear()
    root_logger.setLevel(logging._nameToLevel.get(level.upper(), logging.INFO))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(formatter)
    root_logger.addHandler(ch)

    if log_file:
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(path, maxBytes=MAX_FILE_SIZE, backupCount=BACKUP_COUNT, encoding="utf-8")
            fh.setFormatter(formatter)
            root_logger.addHandler(fh)
        except OSError as e:
            root_logger.error(f"Failed to set up file logging: {e}")


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
