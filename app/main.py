"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
No business logic here. See app.core.lifespan, app.core.exception_handlers
and app.core.container.

Settings are loaded inside create_app() so that tests can set env (and
optionally clear get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.v1.router import api_router
from app.core.config import get_settings
from app.core.container import AutomationContainer, build_container
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan
from app.core.limiter import limiter
from app.middleware import RequestContextMiddleware


def create_app(container: AutomationContainer | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        container: Pre-wired automation core (tests, embedding). Built from
            settings when omitted.
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    app.add_middleware(
        RequestContextMiddleware,
        request_id_header=settings.request_id_header,
        tenant_header=settings.tenant_header_name,
    )

    app.state.automations = container or build_container(settings)

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
