"""
Logging configuration

Console output always; a rotating file under LOGS_PATH when configured
(50MB per file, keep 7).
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

NOISY_LOGGERS = ("sqlalchemy", "sqlalchemy.engine", "sqlalchemy.pool", "httpx", "httpcore", "apscheduler")


def setup_logging(level: str = "INFO", logs_path: Optional[str] = None) -> None:
    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    handlers.append(console_handler)

    if logs_path:
        os.makedirs(logs_path, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(logs_path, "pharmadesk.log"),
            maxBytes=50 * 1024 * 1024,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # Quiet third-party loggers BEFORE basicConfig
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.basicConfig(level=level.upper(), handlers=handlers, force=True)
