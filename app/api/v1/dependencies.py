"""Presentation-layer dependency injection.

Routes depend on these functions only; the automation container itself is
built once in create_app and kept on app.state.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from app.application.use_cases.automations import AutomationManager
from app.core.config import get_settings
from app.core.container import AutomationContainer
from app.core.identifiers import is_safe_identifier


async def get_tenant_id(request: Request) -> str:
    """Resolve the tenant id from the tenant header."""
    name = get_settings().tenant_header_name
    value = request.headers.get(name)
    if not value:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required header: {name}",
        )
    if not is_safe_identifier(value):
        raise HTTPException(
            status_code=400,
            detail="Invalid tenant ID format (use alphanumeric, hyphen, underscore; max 64 characters)",
        )
    return value


def get_container(request: Request) -> AutomationContainer:
    """Return the process-wide automation container."""
    return request.app.state.automations


def get_automation_manager(
    container: Annotated[AutomationContainer, Depends(get_container)],
) -> AutomationManager:
    return container.manager
