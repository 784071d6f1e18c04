"""Format checks for client-supplied identifiers (tenant ids, request ids).

Both end up in logs and span attributes, so only a short alphanumeric,
hyphen and underscore form is accepted.
"""

import re

IDENTIFIER_MAX_LENGTH = 64
_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_-]{1,%d}" % IDENTIFIER_MAX_LENGTH)


def is_safe_identifier(value: str | None) -> bool:
    """Return True if value is non-empty, at most 64 characters, and log-safe."""
    return bool(value) and bool(_IDENTIFIER_RE.fullmatch(value))
