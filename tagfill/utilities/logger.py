#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging configuration for tagfill.

Components never reach for a global logger on their own; each one takes a
logging.Logger in its constructor. setup_logging() is called once by the
CLI and returns the root "tagfill" logger to hand out.

Usage:
    logger = setup_logging(level="INFO", log_file="tagfill.log")
    runner = create_runner(config, logger=logger)
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "tagfill"

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"


def setup_logging(level: Union[str, int] = "INFO",
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure console (and optional file) output for the tagfill logger.

    Args:
        level: Level name or number for the console handler
        log_file: Optional path; receives everything at DEBUG and above

    Returns:
        The configured "tagfill" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Drop handlers from a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT, FILE_DATE_FORMAT))
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Child of the tagfill logger, e.g. get_logger("runner")"""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
