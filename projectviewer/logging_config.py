#  -*- coding: utf-8 -*-
"""
Logging setup for the ``projectviewer`` package logger.
"""

from __future__ import annotations

import logging
import sys

from pathlib import Path


def setup_logging(level: int = logging.INFO, log_file: Path|str|None = None) -> logging.Logger:
    """
    Configure the ``projectviewer`` logger.

    Parameters
    ----------
    level : int, default logging.INFO
        Level of the logger and its handlers.
    log_file : str or Path, optional
        Also write records to this file.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    logger = logging.getLogger('projectviewer')
    logger.setLevel(level)

    # avoid duplicate records when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug('Logging initialized.')
    return logger
