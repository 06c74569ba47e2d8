"""API package exports."""

from postboard.api.middleware import CorrelationIdMiddleware
from postboard.api.routes import router

__all__ = ["router", "CorrelationIdMiddleware"]
