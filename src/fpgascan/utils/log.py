"""
Logging setup for the command line entry point.
Library modules only create loggers; handlers are installed here.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "fpgascan"


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def append_raw_output(log_file: Optional[str], text: str):
    """Appends raw tool output to the configured log file, if any."""
    if not log_file or not text:
        return
    with open(log_file, "a") as f:
        f.write(text)
