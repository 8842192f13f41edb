"""Logger."""

import logging
import sys
from enum import Enum, auto


class LogGroup(Enum):
    """Create log groups."""

    DEFAULT = auto()
    DATA_STATUS = auto()
    BINNING = auto()
    CROSS_TABULATION = auto()
    RANKING = auto()
    CORRELATION = auto()
    PLOTTING = auto()


class ContextualFilter(logging.Filter):
    """Contextual filter."""

    def __init__(self):
        super().__init__()
        self.current_group = LogGroup.DEFAULT
        self.variable = None

    def filter(self, record):
        """Add group and variable name to the log record."""
        record.group = self.current_group.name
        record.variable = self.variable
        return True


class LogColors:
    """Log Colors."""

    RESET = "\033[0m"
    INFO = "\033[92m"
    WARNING = "\033[93m"
    ERROR = "\033[91m"
    CRITICAL = "\033[41m"
    DEBUG = "\033[94m"


class CustomFormatter(logging.Formatter):
    """Custom Formatter."""

    def format(self, record):
        """Create custom logger format."""
        if getattr(record, "variable", None) is None:
            self._style._fmt = "%(asctime)s | %(levelname)s | %(group)s | %(message)s"
        else:
            self._style._fmt = "%(asctime)s | %(levelname)s | %(group)s | %(variable)s | %(message)s"
        return super().format(record)


def setup_logger(name="VarProfile", log_file=None, level=logging.INFO):
    """Set up a logger with a console handler and an optional file handler."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Drop handlers from an earlier setup of the same logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    for log_filter in logger.filters[:]:
        logger.removeFilter(log_filter)

    contextual_filter = ContextualFilter()
    logger.addFilter(contextual_filter)

    if log_file is not None:
        file_formatter = CustomFormatter(
            "%(asctime)s | %(levelname)s | %(group)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    console_formatter = logging.Formatter("%(levelname)s | %(group)s | %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    def colorize_log(record):
        level_color = getattr(LogColors, record.levelname, LogColors.RESET)
        # copy, so the file handler keeps the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{level_color}{record.levelname}{LogColors.RESET}"
        return record

    console_handler.addFilter(colorize_log)

    def set_log_group(group, variable=None):
        if isinstance(group, LogGroup):
            contextual_filter.current_group = group
            contextual_filter.variable = variable
        else:
            raise ValueError("Group must be an instance of LogGroup")

    logger.set_log_group = set_log_group

    return logger


varprofile_logger = setup_logger()


def get_logger():
    """Get the singleton logger instance."""
    return varprofile_logger
