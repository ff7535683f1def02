"""
Logging setup for SEO Outline Writer
"""
import logging

from rich.logging import RichHandler


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a single rich handler.
    Safe to call more than once (app reloads, tests).
    """
    root = logging.getLogger()
    root.setLevel(level)

    if any(isinstance(h, RichHandler) for h in root.handlers):
        return

    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
