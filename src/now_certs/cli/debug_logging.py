"""Logging configuration for the ``--debug`` flag.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves; this is the one place that does.
"""

from __future__ import annotations

import logging

LOGGER_NAME = "now_certs"


def configure_logging(debug: bool) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    With *debug* the level is ``DEBUG`` and Rich renders the records
    when it is installed; otherwise only warnings and above pass.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False

    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    handler: logging.Handler
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("> [debug] %(name)s: %(message)s"))
    else:
        from now_certs.cli.console import get_rich_console

        handler = RichHandler(
            console=get_rich_console(stderr=True),
            show_path=False,
            markup=False,
        )
    logger.addHandler(handler)
    return logger
