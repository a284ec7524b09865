"""
apiguard/logging.py

structlog configuration.

Every module obtains its logger with ``structlog.get_logger(__name__)`` and
logs snake_case event names with keyword context.  configure_logging()
is called once by the application factory; it renders JSON lines in
production and coloured console output when ``log_json`` is off.
"""
from __future__ import annotations

import logging

import structlog

from apiguard.config import settings


def configure_logging(level: str | None = None, *, json: bool | None = None) -> None:
    """Install the structlog processor chain.

    Args:
        level: Minimum level name (DEBUG, INFO, …).  Defaults to settings.log_level.
        json:  Render JSON lines instead of console output.  Defaults to settings.log_json.
    """
    level_name = (level or settings.log_level).upper()
    min_level = logging.getLevelName(level_name)
    if not isinstance(min_level, int):
        min_level = logging.INFO

    use_json = settings.log_json if json is None else json
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
    )
