"""
Runtime settings for vaultlint.

Only logging lives here. Lint behaviour is configured through
``vaultlint.yml`` (see :mod:`vaultlint.engine.config`); the environment
variables below tune how a run reports on itself.
"""

from __future__ import annotations

import logging.config
import os
from typing import Any, Dict

LOG_LEVEL = os.getenv('VAULTLINT_LOG_LEVEL', 'WARNING').upper()


def build_logging(level: str = LOG_LEVEL) -> Dict[str, Any]:
    """Return the ``dictConfig`` mapping for the given level."""

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'plain': {
                'format': '[vaultlint] %(levelname)s %(name)s: %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'plain',
            },
        },
        'loggers': {
            'vaultlint': {
                'handlers': ['console'],
                'level': level,
                'propagate': False,
            },
        },
    }


LOGGING = build_logging()


def configure_logging(*, verbose: bool = False) -> None:
    """Install the logging configuration, switching to DEBUG when ``verbose``."""

    logging.config.dictConfig(build_logging('DEBUG') if verbose else LOGGING)
