"""structlog setup.

Learn: Events are logged as ``logger.info("clothing.created", item_id=...)``
everywhere. Configuration picks the renderer: readable console output
while developing, one JSON object per line everywhere else. Request ids
and the authenticated user id arrive through contextvars.
"""

import logging

import structlog

from wardrobe.config import Settings


def configure_logging(config: Settings) -> None:
    level = logging.DEBUG if config.debug else logging.INFO
    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.is_development
        else structlog.processors.JSONRenderer()
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
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
