import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

# Console output sits next to the CLI's rich progress, so it stays short
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    force: bool = False,
    stream: Optional[TextIO] = None,
    quiet: bool = False,
) -> logging.Logger:
    """
    Set up the "wikipull" logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file receiving the same records with timestamps
        format_string: Override for both the console and file formats
        force: Replace handlers installed by an earlier call
        stream: Console stream (defaults to stderr so stdout stays free for page output)
        quiet: Console shows errors only; the file keeps the requested level

    Returns:
        Configured "wikipull" logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    console_level = logging.ERROR if quiet else numeric_level

    logger = logging.getLogger("wikipull")
    logger.setLevel(min(numeric_level, console_level))

    if force or not logger.handlers:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter(format_string or CONSOLE_FORMAT))
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(logging.Formatter(format_string or FILE_FORMAT))
            logger.addHandler(file_handler)

    # Page output goes to stdout; keep records away from the root logger
    logger.propagate = False

    return logger
