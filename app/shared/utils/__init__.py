"""Shared utilities: datetime and id generators."""

from app.shared.utils.datetime import elapsed_ms, utc_now
from app.shared.utils.generators import generate_cuid, generate_execution_id

__all__ = [
    "elapsed_ms",
    "generate_cuid",
    "generate_execution_id",
    "utc_now",
]
