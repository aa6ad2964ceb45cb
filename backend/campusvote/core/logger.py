import logging
import os
from logging.handlers import RotatingFileHandler

from campusvote.core.settings import get_settings


def _build_logger(name: str, filename: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    # Prevent duplicate handlers
    if not logger.handlers:
        log_dir = get_settings().log_dir
        os.makedirs(log_dir, exist_ok=True)
        # Rotating file handler: max 5 MB per file, keep 3 backups
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, filename), maxBytes=5*1024*1024, backupCount=3
        )
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    return logger


auth_logger = _build_logger("auth", "auth.log")
election_logger = _build_logger("election", "election.log")
