"""
Terminal output for build progress.

Library modules log through the standard logging module. This module
renders those records the way a build script reads on a terminal:

    ==> Build: BOARD=pi2          (steps, bold blue)
    [warn] HDMI kernels not found (warnings, yellow)
    [err] Missing tool on PATH    (errors, red)

Debug records (per-file copies, commands) are printed plain.
"""

import logging
import sys
from typing import TextIO

import typer


class StepFormatter(logging.Formatter):
    """
    Formats log records as build steps.

    Args:
        color: Emit ANSI colors. Turn off when output is not a terminal.
    """

    def __init__(self, color: bool = True):
        super().__init__("%(message)s")
        self._color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        if record.levelno >= logging.ERROR:
            return f"{self._style_text('[err]', typer.colors.RED)} {message}"
        if record.levelno >= logging.WARNING:
            return f"{self._style_text('[warn]', typer.colors.YELLOW)} {message}"
        if record.levelno >= logging.INFO:
            return "\n" + self._style_text(f"==> {message}", typer.colors.BLUE)
        return message

    def _style_text(self, text: str, fg: str) -> str:
        if not self._color:
            return text
        return typer.style(text, fg=fg, bold=True)


def setup_logging(verbose: bool = False, stream: TextIO | None = None) -> logging.Handler:
    """
    Send pibuild log records to the terminal.

    Calling this again replaces the previously installed handler.

    Args:
        verbose: Also show debug records
        stream: Output stream (default: stderr)

    Returns:
        The installed handler
    """
    stream = stream or sys.stderr
    logger = logging.getLogger("pibuild")

    for handler in list(logger.handlers):
        if isinstance(handler.formatter, StepFormatter):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(StepFormatter(color=stream.isatty()))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return handler


def teardown_logging(handler: logging.Handler):
    """Remove a handler installed by setup_logging()."""
    logger = logging.getLogger("pibuild")
    logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
