"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.contact_repo import InMemoryContactStore
from app.infrastructure.persistence.repositories.workflow_repo import InMemoryWorkflowStore

__all__ = [
    "InMemoryContactStore",
    "InMemoryWorkflowStore",
]
