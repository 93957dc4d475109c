from __future__ import annotations

import logging
import sys
from logging import Logger
from logging.handlers import RotatingFileHandler
from typing import Optional

_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def _has_handler(logger: Logger, cls, filename: Optional[str] = None) -> bool:
    for h in logger.handlers:
        if type(h) is not cls:
            continue
        if filename is None:
            return True
        if str(getattr(h, "baseFilename", "")).endswith(str(filename)):
            return True
    return False


def setup_logging(log_level: int | str = logging.INFO, logfile: Optional[str] = None) -> Logger:
    """Configure root logging to stdout and, when given, a rotating file.

    Idempotent: safe to call multiple times (one app per test) without duplicating handlers.
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logger = logging.getLogger()
    logger.setLevel(log_level)
    fmt = logging.Formatter(_FORMAT)

    if not _has_handler(logger, logging.StreamHandler):
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(log_level)
        ch.setFormatter(fmt)
        logger.addHandler(ch)

    if logfile and not _has_handler(logger, RotatingFileHandler, filename=logfile):
        fh = RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        fh.setLevel(log_level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    # Flask dev server request lines go through root as well
    werk = logging.getLogger("werkzeug")
    werk.setLevel(logging.INFO)
    werk.propagate = True

    return logger
