"""ID generators (CUID2-based execution ids)."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

EXECUTION_ID_PREFIX = "exec_"


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_execution_id() -> str:
    """Return a new workflow execution id (``exec_<cuid>``)."""
    return f"{EXECUTION_ID_PREFIX}{generate_cuid()}"
