"""Shared plumbing for CLI commands."""

import logging
import os
from collections.abc import Callable
from functools import wraps
from typing import Any

import click

from rebaser.cli.output import user_output
from rebaser.core.errors import RebaserError

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Send engine logs to stderr; DEBUG with -v or REBASER_DEBUG set."""
    if verbose or os.getenv("REBASER_DEBUG"):
        level = logging.DEBUG
        log_format = "[%(levelname)s %(name)s:%(lineno)d] %(message)s"
    else:
        level = logging.INFO
        log_format = "[%(levelname)s] %(message)s"
    logging.basicConfig(level=level, format=log_format)
    logging.getLogger("rebaser").setLevel(level)


def fail(message: str) -> None:
    """Print a red error line and exit with status 1."""
    user_output(click.style(f"Error: {message}", fg="red"))
    raise SystemExit(1)


def error_boundary(func: Callable) -> Callable:
    """Decorator turning fatal errors into an error line and exit status 1.

    RebaserError covers conditions the run refuses to continue past;
    RuntimeError covers failed git/gh invocations. Anything else is a bug and
    propagates with its traceback.

    Example:
        @click.command()
        @error_boundary
        @click.pass_obj
        def my_command(ctx: RebaserContext) -> None:
            ...
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (RebaserError, RuntimeError) as e:
            logger.debug("Exception details:", exc_info=True)
            fail(str(e))

    return wrapper
