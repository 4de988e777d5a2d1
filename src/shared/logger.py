"""Налаштування логування."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Налаштовує кореневий логер.

    Args:
        level: Рівень логування (DEBUG, INFO, WARNING, ERROR).
        log_file: Необов'язковий файл, куди дублюються записи. Корисно для
            інтерактивної консолі, щоб логи не змішувались з діалогом.
    """
    numeric = getattr(logging, level.upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers = [logging.FileHandler(log_file, encoding="utf-8")]
    logging.basicConfig(
        level=numeric,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )
