"""
Centralized logging configuration.
"""

import logging

from rich.logging import RichHandler

NOISY_LIBRARIES = [
    "asyncio",
    "PyObjCTools",
    "objc",
]


class NullHandler(logging.Handler):
    """Handler that discards all log records."""

    def emit(self, record):
        pass


def setup_logging(verbose: bool = False) -> None:
    """
    Configure permwatch logging and quiet third-party loggers.

    Args:
        verbose: If True, log permwatch debug output. Otherwise warnings only.
    """
    root_logger = logging.getLogger()
    root_logger.handlers = [
        RichHandler(show_path=verbose, rich_tracebacks=True, markup=False)
    ]
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("permwatch").setLevel(
        logging.DEBUG if verbose else logging.WARNING
    )

    for logger_name in NOISY_LIBRARIES:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.CRITICAL)
        logger.propagate = False
        logger.handlers = [NullHandler()]
