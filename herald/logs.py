"""
Herald logging: silent by default, rich console output on request.

Every herald module logs on its own `logging.getLogger(__name__)` child of the
"herald" logger. A NullHandler keeps the library quiet until the host configures
logging itself or calls install().
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("herald")
logger.addHandler(logging.NullHandler())


def install(level="INFO", *, colorful=True):
    """
    Attach a rich console handler to the "herald" logger and return it.

    Calling it again replaces the handler installed previously.
    """
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True, no_color=not colorful),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


__all__ = (
    "logger",
    "install",
)
