"""Request context middleware (raw ASGI).

Each HTTP request gets a request id: the client's, when it is a safe
identifier, otherwise a fresh CUID. The id is echoed on the response and,
together with a well-formed tenant header, stored on ``scope["state"]`` and
tagged on the current trace span. Tenant header enforcement stays in the
API dependencies; a malformed tenant header is simply not recorded here.
"""

from typing import Callable

from app.core.identifiers import is_safe_identifier
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes
from app.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


def _header(scope: dict, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("utf-8", errors="replace").strip()
    return None


def resolve_request_id(raw: str | None) -> str:
    """Return the client's id when it is safe to log, otherwise a fresh CUID."""
    candidate = (raw or "").strip()
    return candidate if is_safe_identifier(candidate) else generate_cuid()


def RequestContextMiddleware(
    app: Callable,
    request_id_header: str = "X-Request-ID",
    tenant_header: str = "X-Tenant-ID",
) -> Callable:
    """Wrap an ASGI app with request id and tenant bookkeeping."""
    request_id_key = request_id_header.lower().encode()
    tenant_key = tenant_header.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        request_id = resolve_request_id(_header(scope, request_id_key))
        tenant_id = _header(scope, tenant_key)
        state = scope.setdefault("state", {})
        state["request_id"] = request_id
        if is_safe_identifier(tenant_id):
            state["tenant_id"] = tenant_id
        logger.debug(
            "%s %s request_id=%s tenant_id=%s",
            scope.get("method"),
            scope.get("path"),
            request_id,
            state.get("tenant_id"),
        )

        async def send_with_context(message: dict) -> None:
            if message["type"] == "http.response.start":
                attributes = {"request_id": request_id}
                if "tenant_id" in state:
                    attributes["tenant_id"] = state["tenant_id"]
                add_span_attributes(**attributes)
                message["headers"] = [
                    *message.get("headers", []),
                    (request_id_header.encode(), request_id.encode()),
                ]
            await send(message)

        await app(scope, receive, send_with_context)

    return asgi_app
