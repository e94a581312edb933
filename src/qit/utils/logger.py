# src/qit/utils/logger.py
from __future__ import annotations

import logging
from typing import Optional

from colorama import Fore, Style

_LOGGER_NAME = "qit"
_BANNER = "=" * 38


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


def log_banner(message: str, logger: Optional[logging.Logger] = None) -> None:
    """Progress banner framed the way the stage headers are printed on the console."""
    log = logger or get_logger()
    log.info(_BANNER)
    log.info(message)
    log.info(_BANNER)


def log_success(message: str, logger: Optional[logging.Logger] = None) -> None:
    """Log a success message in green."""
    log = logger or get_logger()
    log.info(f"{Fore.GREEN}{message}{Style.RESET_ALL}")


def setup_logger(log_file: Optional[str] = "qit.log") -> logging.Logger:
    """
    Configure the root 'qit' logger:
      - INFO to console
      - DEBUG to file (qit.log), unless log_file is None
    Idempotent: safe to call multiple times.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if getattr(setup_logger, "_configured", False):
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Remove any pre-existing handlers (only for our logger)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    # Console handler (INFO)
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # File handler (DEBUG)
    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    setup_logger._configured = True  # type: ignore[attr-defined]
    return logger
