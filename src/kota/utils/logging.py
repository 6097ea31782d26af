"""Log handlers for the ``kota`` logger tree."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from kota.utils.config import Config

LOG_FILE = "kota.log"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

# litellm logs every request at INFO under its own name
NOISY_LOGGERS = ("LiteLLM", "httpx")


def _file_handler(config: Config) -> logging.Handler:
    config.logging_path.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        config.logging_path / LOG_FILE, maxBytes=1_000_000, backupCount=3
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    handler.setLevel(logging.DEBUG)
    return handler


def _console_handler(config: Config) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handler.setLevel(config.log_level)
    return handler


def setup_logging(config: Config, console_output: bool = False) -> None:
    """
    Route ``kota.*`` records to a rotating file under the workspace.

    The file always receives DEBUG and up. With ``console_output`` (server
    mode) records at ``config.log_level`` and up also go to stdout.
    Calling this again replaces the handlers from the previous call.
    """
    root_logger = logging.getLogger("kota")
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.addHandler(_file_handler(config))
    if console_output:
        root_logger.addHandler(_console_handler(config))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
