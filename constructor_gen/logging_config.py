"""Logging setup shared by all constructor_gen modules.

Modules obtain their logger with ``get_logger(__name__)``; the CLI calls
``configure_logging`` once to attach a handler to the package logger.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "constructor_gen"

LOG_FORMAT = "%(message)s"
PLAIN_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package logger.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A ``logging.Logger`` instance.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(level: int | str = logging.WARNING, use_rich: bool = True) -> None:
    """Configure the package logger.

    Args:
        level: Logging level name or number.
        use_rich: Render records with ``RichHandler`` on stderr; otherwise
            use a plain ``StreamHandler``.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Reconfiguring replaces the previous handler instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_LOG_FORMAT))

    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
