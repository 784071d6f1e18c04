"""Application use cases: one entry point per workflow."""

from app.application.use_cases.automations import AutomationManager

__all__ = ["AutomationManager"]
