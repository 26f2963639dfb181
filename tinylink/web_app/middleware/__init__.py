"""Middleware for the tinylink web app."""

from .logging import LoggingMiddleware
from .error_handling import registry_error_handler

__all__ = ["LoggingMiddleware", "registry_error_handler"]
