"""ASGI middleware."""

from app.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
