"""Core: config, exception handlers, lifespan, and service composition."""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
