"""Logging setup for the actionroll package."""

import logging
import sys
from pathlib import Path

LOGGER_NAME = "actionroll"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


class ColorFormatter(logging.Formatter):
    """Formatter that wraps the level name in ANSI colour codes."""

    COLORS = {
        logging.DEBUG: "\033[36m",      # cyan
        logging.INFO: "\033[32m",       # green
        logging.WARNING: "\033[33m",    # yellow
        logging.ERROR: "\033[31m",      # red
        logging.CRITICAL: "\033[1;31m", # bold red
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno)
        if not color:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logging(
    level: str | int = "INFO",
    log_file: Path | str | None = None,
    enable_color: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Level name or number applied to the package logger.
        log_file: Optional path; when given, records are also written there
            (never colourised).
        enable_color: Colourise console level names when stderr is a TTY.

    Returns:
        The configured ``actionroll`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    # Re-running setup replaces our handlers rather than stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    use_color = enable_color and sys.stderr.isatty()
    formatter_cls = ColorFormatter if use_color else logging.Formatter
    console.setFormatter(formatter_cls(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
