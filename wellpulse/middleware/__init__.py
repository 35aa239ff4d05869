"""Middleware package."""
from wellpulse.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
