"""Logging setup for applications using fieldview.

fieldview modules only create loggers (``logging.getLogger(__name__)``);
handlers are configured by the application, for example with
``setup_logging`` below.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    verbose: bool = False, debug: bool = False, console: Console | None = None
) -> None:
    """Configure root logging with a rich handler.

    ``verbose`` enables INFO, ``debug`` enables DEBUG, which includes one line
    per inclusion decision and per unreadable attribute.
    """
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console or Console(stderr=True),
                show_path=False,
                markup=False,
            )
        ],
        force=True,
    )

    logging.getLogger("fieldview").setLevel(level)
