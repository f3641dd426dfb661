"""structlog setup for host processes.

Library modules only call structlog.get_logger(); configuring output is left
to whichever process embeds the core.
"""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: int = logging.INFO, *, json: bool = False) -> None:
    """Configure structlog with level filtering and a console or JSON renderer."""
    renderer = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


__all__ = ["configure_logging"]
