"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.utils import (
    elapsed_ms,
    generate_cuid,
    generate_execution_id,
    utc_now,
)

__all__ = [
    "elapsed_ms",
    "generate_cuid",
    "generate_execution_id",
    "utc_now",
]
