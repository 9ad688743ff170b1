"""Structured logging setup built on structlog.

Library modules only ask for a logger; nothing is configured on import,
so the host application's logging and structlog setup stay in charge.
Entry points such as ``scripts/budget_report.py`` call
``configure_logging`` once. Events are rendered by structlog and emitted
through the standard library ``logging`` module.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from . import config


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    level_name = (level or config.LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    use_json = config.LOG_JSON if json_output is None else json_output

    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(numeric_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)
