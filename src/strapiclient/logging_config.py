import logging as root_logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

SDK_LOGGER_NAME = "strapiclient"


def setup_sdk_logging(
    level="INFO",
    pretty: bool = False,
    console: Optional[Console] = None,
    propagate: bool = False,
):
    """
    Configures the global logging strategy for the Strapi client SDK.

    This function initializes the 'strapiclient' logger namespace and provides two
    distinct output modes: a 'pretty' mode rendered through the Rich library,
    and a standard stream mode for basic environments (CI logs, containers).
    Existing handlers are cleared first, so calling it twice never duplicates
    log entries.

    Args:
        level (str): The logging threshold (e.g., "DEBUG", "INFO", "WARNING").
            Defaults to "INFO".
        pretty (bool): If True, enables Rich terminal output with colors,
            timestamps, and formatted tracebacks.
        console (Optional[rich.console.Console]): An optional Rich Console
            instance. Only used in pretty mode. Defaults to a new
            `Console(stderr=True)`.
        propagate (bool): Whether records bubble up to the root logger.

    Notes:
        - Propagation is disabled by default so that host applications (and
          test runners like pytest) do not print every record twice.
    """
    logger = root_logging.getLogger(SDK_LOGGER_NAME)

    # Clear existing handlers to prevent duplicates
    if logger.hasHandlers():
        logger.handlers.clear()

    if pretty:
        console = console or Console(stderr=True)

        handler = RichHandler(
            level=level,
            console=console,
            show_time=True,
            show_path=True,
            markup=True,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        formatter = root_logging.Formatter(
            fmt="[dim white]%(name)s[/dim white]: %(message)s", datefmt="[%X]"
        )
        handler.setFormatter(formatter)
        init_message = f"SDK Logging initialized at level: [bold]{level}[/bold]"
        extra = {"markup": True}
    else:
        handler = root_logging.StreamHandler(sys.stderr)
        # Standard format: Time [Level] Name: Message
        formatter = root_logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        init_message = f"SDK Logging initialized at level: {level}"
        extra = {}

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate

    logger.info(init_message, extra=extra)


def get_logger(name: Optional[str] = None) -> root_logging.Logger:
    """
    Retrieves a logger instance within the SDK namespace.

    Args:
        name (Optional[str]): The name of the logger, typically `__name__`
            (e.g., 'strapiclient.comm.client'). If None, the top-level
            'strapiclient' logger is returned.

    Returns:
        logging.Logger: A logger attached to the SDK hierarchy.
    """
    if name is not None:
        return root_logging.getLogger(name=name)
    return root_logging.getLogger(SDK_LOGGER_NAME)
