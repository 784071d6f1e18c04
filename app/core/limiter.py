"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

# Manual workflow runs send real messages; keep them well below write limits.
TEST_RUN_LIMIT = "30/minute"
VALIDATION_LIMIT = "120/minute"

limit_test_runs = limiter.limit(TEST_RUN_LIMIT)
limit_validation = limiter.limit(VALIDATION_LIMIT)
