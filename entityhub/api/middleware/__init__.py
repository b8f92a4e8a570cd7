"""API middleware."""

from entityhub.api.middleware.error_handler import ErrorHandlerMiddleware
from entityhub.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
