"""Observability layer - structured logging."""

from metamovies.observability.logging import bind_context, get_logger, setup_logging

__all__ = ["bind_context", "get_logger", "setup_logging"]
