"""
Tests for logger setup
"""
import logging

from scanbonus.core.logger import calculator_logger, scan_logger, setup_logger


def _console_handlers(logger: logging.Logger):
    # FileHandler subclasses StreamHandler, so compare exact types
    return [h for h in logger.handlers if type(h) is logging.StreamHandler]


class TestSetupLogger:
    """Test cases for setup_logger"""

    def test_console_handler_by_default(self):
        logger = setup_logger("scanbonus.tests.console")
        assert len(_console_handlers(logger)) == 1

    def test_console_handler_optional(self):
        logger = setup_logger("scanbonus.tests.quiet", console=False)
        assert logger.handlers == []

    def test_parent_loggers_leave_console_to_root(self):
        for logger in (scan_logger, calculator_logger):
            assert _console_handlers(logger) == []
            assert logger.propagate
            assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
