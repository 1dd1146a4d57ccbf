import logging
import os
from datetime import datetime

LOGGER_NAME = "hashline_editor"


def setup_logger(log_dir: str = ".hashline/logs") -> logging.Logger:
    """Creates a file logger for the package. All debug output goes here.

    Calling it again reuses the handler that is already attached.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in logger.handlers:
        if getattr(handler, "_hashline_file_handler", False):
            return logger

    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"edit_{timestamp}.log")

    # Debug file handler
    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S"
    ))
    fh._hashline_file_handler = True
    logger.addHandler(fh)

    return logger
