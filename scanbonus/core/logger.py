"""
Logging utilities for the scan & bonus backend.
"""
import logging
import sys
from datetime import datetime
from ..config import settings


def setup_logger(
    name: str,
    log_file: str = None,
    level=logging.INFO,
    console: bool = True
) -> logging.Logger:
    """
    Setup logger with file and console handlers

    Args:
        name: Logger name
        log_file: Optional log file name
        level: Logging level
        console: Attach a stdout handler; off for loggers whose records
            already reach the root console handler

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = settings.LOGS_DIR / log_file
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Parent loggers: module loggers under "scanbonus.scanner" and
# "scanbonus.calculator" write to these files. Console output comes from
# the root handler only.
scan_logger = setup_logger(
    'scanbonus.scanner',
    f'scan_{datetime.now().strftime("%Y%m%d")}.log',
    console=False
)

calculator_logger = setup_logger(
    'scanbonus.calculator',
    f'calculator_{datetime.now().strftime("%Y%m%d")}.log',
    console=False
)

# Default logger for general use
logger = setup_logger(
    'app',
    f'app_{datetime.now().strftime("%Y%m%d")}.log'
)
