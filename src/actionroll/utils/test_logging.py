"""Tests for logging setup."""

import logging

from actionroll.utils.logging import LOGGER_NAME, setup_logging


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "logs" / "actionroll.log"
    logger = setup_logging(level="debug", log_file=log_file, enable_color=False)
    try:
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

        logging.getLogger("actionroll.core.evaluator").debug("rolled %d", 17)
        for handler in logger.handlers:
            handler.flush()
        assert "rolled 17" in log_file.read_text(encoding="utf-8")

        # Calling again replaces handlers instead of stacking them
        setup_logging(level="INFO", enable_color=False)
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
