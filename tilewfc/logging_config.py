"""
Logging setup for tilewfc.

All tilewfc.* loggers go through the "tilewfc" logger configured here:
console output at the requested level and, optionally, DEBUG to a file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(funcName)-15s | %(message)s"


def setup_logging(
    console_level: int = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the tilewfc logger. Safe to call more than once.

    Args:
        console_level: Level for stderr output
        log_file: Optional file that receives DEBUG and above

    Returns:
        The configured "tilewfc" logger
    """
    root_logger = logging.getLogger("tilewfc")
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)

    return root_logger
