"""
Logger — настройка логирования проекта

Модули пишут через logging.getLogger(__name__); обработчики вешаются один
раз на корневой логгер пакета ("src"). Вызывается из create_engine() при
сборке engine планировщиком.
"""

import logging
import os
import sys
from datetime import datetime, timezone

LOGGER_NAME = "src"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logger(level: str = "INFO", log_dir: str | None = None) -> logging.Logger:
    """Configure the root project logger once; module loggers propagate to it."""
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level.upper())

    if not log.handlers:
        fmt = logging.Formatter(LOG_FORMAT)

        sh = logging.StreamHandler(sys.stdout)
        sh.setFormatter(fmt)
        log.addHandler(sh)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            fh = logging.FileHandler(os.path.join(log_dir, f"valuation_{ts}.log"), encoding="utf-8")
            fh.setFormatter(fmt)
            log.addHandler(fh)

    return log
