"""Logging setup for the ``ppgresp`` command line.

Library modules only create loggers (``logging.getLogger(__name__)``) and
log at DEBUG; handlers are installed here, by the CLI.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _build_logging_config(verbose: bool, console_format: str | None) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": console_format or DEFAULT_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG" if verbose else "INFO",
                "formatter": "console",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "ppgresp": {
                "level": "DEBUG" if verbose else "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(*, verbose: bool = False, console_format: str | None = None) -> None:
    """Install the console handler.

    Args:
        verbose: If True, show DEBUG messages from the pipeline stages.
        console_format: Override the console format string.
    """
    logging.config.dictConfig(_build_logging_config(verbose, console_format))
    logging.getLogger(__name__).debug("Logging configured (verbose=%s)", verbose)
