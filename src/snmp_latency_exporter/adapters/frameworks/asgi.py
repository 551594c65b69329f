"""ASGI adapter serving the Prometheus scrape endpoint.

A plain ASGI application: uvicorn serves it in production and httpx
exercises it directly in tests.
"""

import json
from collections.abc import Callable, Coroutine
from typing import Any

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from snmp_latency_exporter.core.logs import log_exception

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    # @tra: Adapter.ASGI.SendResponse.Headers
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    # @tra: Adapter.ASGI.SendResponse.Body
    await send({"type": "http.response.body", "body": body.encode()})


async def _handle_endpoint(
    send: Send,
    render: Callable[[], str],
    content_type: str,
    log_message: str,
) -> None:
    """Render an endpoint body with error handling and send the response.

    Args:
        send: ASGI send callable for writing response.
        render: Function that returns the response body.
        content_type: Content-Type header for success response.
        log_message: Message to log on error.
    """
    try:
        body = render()
    except Exception:
        log_exception(log_message)
        error_body = json.dumps({"error": "Internal Server Error"})
        await _send_response(send, 500, "application/json", error_body)
        return
    await _send_response(send, 200, content_type, body)


def create_asgi_app(
    registry: CollectorRegistry,
    metrics_path: str = "/metrics",
) -> ASGIApp:
    """Create an ASGI app exposing registry in the Prometheus text format.

    Args:
        registry: Registry rendered on every scrape.
        metrics_path: Path of the scrape endpoint (default: "/metrics").

    Returns:
        ASGI application callable.
    """

    def render() -> str:
        return generate_latest(registry).decode("utf-8")

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        # @tra: Adapter.ASGI.MetricsEndpointHTTPStatus
        # @tra: Adapter.ASGI.MetricsEndpointContentType
        # @tra: Adapter.ASGI.MetricsEndpointEncodingError
        if scope["path"] == metrics_path:
            await _handle_endpoint(
                send,
                render,
                CONTENT_TYPE_LATEST,
                "Error encoding metrics endpoint",
            )
        # @tra: Adapter.ASGI.RoutingUnknownPath
        else:
            await _send_response(send, 404, "text/plain", "Not Found")

    return app
