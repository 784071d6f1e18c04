"""Tests for RequestContextMiddleware and identifier format checks."""

import pytest

from app.core.identifiers import is_safe_identifier
from app.middleware import RequestContextMiddleware


class RecordingApp:
    """ASGI app that keeps the scope it saw and answers 204."""

    def __init__(self) -> None:
        self.scope = None

    async def __call__(self, scope, receive, send) -> None:
        self.scope = scope
        if scope["type"] == "http":
            await send({"type": "http.response.start", "status": 204, "headers": []})
            await send({"type": "http.response.body", "body": b""})


async def _call(middleware, headers: dict[str, str], scope_type: str = "http"):
    sent = []

    async def receive():
        return {"type": "http.request", "body": b""}

    async def send(message):
        sent.append(message)

    scope = {
        "type": scope_type,
        "method": "GET",
        "path": "/api/v1/health",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    await middleware(scope, receive, send)
    return sent


def _response_header(sent, name: bytes) -> str | None:
    for key, value in sent[0]["headers"]:
        if key.lower() == name:
            return value.decode()
    return None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("tenant-1", True),
        ("req_ABC-09", True),
        ("x" * 64, True),
        ("x" * 65, False),
        ("", False),
        (None, False),
        ("has space", False),
        ("abc\n", False),
        ("tenant/../2", False),
    ],
)
def test_is_safe_identifier(value, expected) -> None:
    assert is_safe_identifier(value) is expected


async def test_safe_ids_are_kept_and_recorded() -> None:
    inner = RecordingApp()
    sent = await _call(
        RequestContextMiddleware(inner),
        {"X-Request-ID": "req-123", "X-Tenant-ID": "tenant-1"},
    )

    assert inner.scope["state"] == {"request_id": "req-123", "tenant_id": "tenant-1"}
    assert _response_header(sent, b"x-request-id") == "req-123"


async def test_unsafe_ids_are_not_trusted() -> None:
    inner = RecordingApp()
    sent = await _call(
        RequestContextMiddleware(inner),
        {"X-Request-ID": "evil\tid", "X-Tenant-ID": "bad tenant!"},
    )

    request_id = inner.scope["state"]["request_id"]
    assert request_id != "evil\tid"
    assert is_safe_identifier(request_id)
    assert "tenant_id" not in inner.scope["state"]
    assert _response_header(sent, b"x-request-id") == request_id


async def test_missing_request_id_is_generated() -> None:
    inner = RecordingApp()
    sent = await _call(RequestContextMiddleware(inner), {})
    assert _response_header(sent, b"x-request-id") == inner.scope["state"]["request_id"]


async def test_custom_header_names() -> None:
    inner = RecordingApp()
    sent = await _call(
        RequestContextMiddleware(inner, request_id_header="X-Trace", tenant_header="X-Org"),
        {"X-Trace": "t-1", "X-Org": "org-9"},
    )
    assert inner.scope["state"] == {"request_id": "t-1", "tenant_id": "org-9"}
    assert _response_header(sent, b"x-trace") == "t-1"


async def test_non_http_scopes_pass_through() -> None:
    inner = RecordingApp()
    await _call(RequestContextMiddleware(inner), {"X-Request-ID": "req-1"}, "lifespan")
    assert inner.scope["type"] == "lifespan"
    assert "state" not in inner.scope
