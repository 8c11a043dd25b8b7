#!/usr/bin/env python3
"""
pipeline_logging.py

Logging for the lexigraph command line pipelines: a DEBUG log file inside the
run's output directory and an INFO Rich console on the terminal.
"""
import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(funcName)-20s | %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def _console_handler(level: int, markup: bool = False) -> RichHandler:
    handler = RichHandler(console=Console(), show_path=False, rich_tracebacks=markup, markup=markup)
    handler.setLevel(level)
    return handler


def setup_pipeline_logging(out_dir: Path, logger_name: str, log_name: str = "pipeline.log") -> logging.Logger:
    """
    Route all logging for one pipeline run to ``out_dir / log_name`` and the console.

    Handlers already attached to the root logger are replaced, so calling this
    twice in one process (as the tests do) leaves a single file and console pair.

    Args:
        out_dir: Run output directory; created if missing
        logger_name: Pipeline name, e.g. 'lattice2hyp'
        log_name: Log file name inside ``out_dir``

    Returns:
        The pipeline's logger
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_file = out_dir / log_name
    file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(_console_handler(logging.INFO, markup=True))

    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = True

    logger.info("=" * 80)
    logger.info(f"LEXIGRAPH PIPELINE: {logger_name.upper()}")
    logger.info("=" * 80)
    logger.info(f"Pipeline started at: {datetime.now().strftime(LOG_DATEFMT)}")
    logger.info(f"Log file: {log_file}")
    logger.info("-" * 80)

    return logger


def get_pipeline_logger(logger_name: str) -> logging.Logger:
    """Return ``logger_name``, giving it a WARNING console handler when nothing is configured yet."""
    logger = logging.getLogger(logger_name)
    if logger.handlers or (logger.parent is not None and logger.parent.handlers):
        return logger

    logger.addHandler(_console_handler(logging.WARNING))
    logger.setLevel(logging.WARNING)
    return logger
