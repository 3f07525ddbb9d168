"""
structlog configuration shared by the API server and scripts.

``json`` is for log shippers; ``text`` renders for a terminal. Both carry
any context bound with ``structlog.contextvars``.
"""

from __future__ import annotations

import logging

import structlog


def _renderer(fmt: str):
    if fmt == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer()]


def configure_logging(level: str = "info", fmt: str = "json", **static_context) -> None:
    """Configure structlog for ``level`` and ``fmt``; ``static_context`` is added to every event."""
    structlog.contextvars.clear_contextvars()
    if static_context:
        structlog.contextvars.bind_contextvars(**static_context)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            *_renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        cache_logger_on_first_use=False,
    )
