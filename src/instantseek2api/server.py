"""
OpenAI-compatible API server for InstantSeek2Api.

Provides a Starlette-based HTTP server that exposes the InstantSeek chat service
through the OpenAI chat-completions format, so any application built on the
OpenAI SDK can talk to it by pointing ``base_url`` at this server.

Endpoints:
    POST /v1/chat/completions     Chat completion (streaming and non-streaming)
    *    /<anything else>         Service info (always 200)

Request flow:
    bearer auth (middleware, every path) → route → method check → parse →
    model/messages validation → upstream call → completion → JSON or SSE

Architecture:
    - Settings are resolved once when the app is built and never re-read.
    - One InstantSeekClient (httpx connection pool) is opened in the lifespan
      and shared by all requests; requests hold no other shared state.
    - Every GatewayError becomes an OpenAI-style error body with its status code.

Usage:
    from instantseek2api.server import create_app
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
"""

import hmac
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from loguru import logger
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .client import InstantSeekClient
from .config import AUTH_TOKEN_ENV, Settings, load_settings
from .errors import (
    GatewayError,
    InvalidRequest,
    MethodNotAllowed,
    Unauthorized,
    error_response,
)
from .schemas import ChatCompletionRequest
from .translate import (
    build_completion,
    build_stream_events,
    build_upstream_request,
    wants_stream,
)

CHAT_COMPLETIONS_PATH = "/v1/chat/completions"

# Starlette defaults function endpoints to GET/HEAD; both routes take every method
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]

SERVICE_INFO = {
    "status": "InstantSeek2Api Service Running...",
    "message": "MoLoveSze...",
}


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Reject any request whose Authorization header is not ``Bearer <token>``.

    Runs before routing, so it also guards the service-info route.
    """

    def __init__(self, app, token: str):
        super().__init__(app)
        self._expected = f"Bearer {token}".encode()

    async def dispatch(self, request: Request, call_next):
        provided = request.headers.get("authorization", "").encode()
        if not hmac.compare_digest(provided, self._expected):
            logger.warning(f"Rejected unauthenticated request: {request.method} {request.url.path}")
            return error_response(Unauthorized())
        return await call_next(request)


@asynccontextmanager
async def _lifespan(app: Starlette):
    """Open the upstream client at startup and close it on shutdown."""
    settings: Settings = app.state.settings
    app.state.upstream = InstantSeekClient(
        settings.upstream_url,
        timeout=settings.timeout,
        transport=app.state.transport,
    )
    logger.info(f"Upstream client ready: {settings.upstream_url} (timeout={settings.timeout}s)")
    try:
        yield
    finally:
        await app.state.upstream.close()
        logger.info("Upstream client closed")


# ── Endpoints ────────────────────────────────────────────────────────

async def service_info(request: Request) -> JSONResponse:
    return JSONResponse(SERVICE_INFO)


async def chat_completions(request: Request):
    """Translate one OpenAI chat-completions request through InstantSeek."""
    if request.method != "POST":
        raise MethodNotAllowed()

    req = await _parse_request(request)
    upstream_req = build_upstream_request(req)

    logger.info(f"Processing request: {upstream_req.message[:50]}...")
    upstream: InstantSeekClient = request.app.state.upstream
    reply = await upstream.send(upstream_req)

    completion = build_completion(reply)

    if wants_stream(req, request.headers.get("accept")):
        return _streaming_response(build_stream_events(completion))
    return JSONResponse(completion.model_dump())


async def _parse_request(request: Request) -> ChatCompletionRequest:
    body = await request.body()
    try:
        return ChatCompletionRequest.model_validate_json(body)
    except ValidationError as e:
        raise InvalidRequest(str(e)) from e


def _streaming_response(events: list[str]) -> EventSourceResponse:
    """Emit pre-serialized chunks as an SSE stream.

    The payloads are fully built before the response starts, so the stream
    itself cannot fail partway through.
    """
    async def event_generator():
        for data in events:
            yield {"data": data}

    return EventSourceResponse(
        event_generator(),
        headers={"Cache-Control": "no-cache"},
        sep="\n",
    )


async def _handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Request error: {exc.message}")
    else:
        logger.warning(f"Rejected request ({exc.status_code}): {exc.message}")
    return error_response(exc)


# ── App ──────────────────────────────────────────────────────────────

def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Starlette:
    """Build the gateway application.

    Args:
        settings: Gateway settings. Defaults to ``load_settings()`` (environment).
        transport: Optional httpx transport for the upstream client; tests
                   pass an ``httpx.MockTransport`` to stand in for InstantSeek.

    Returns:
        Starlette: The ASGI application.
    """
    if settings is None:
        settings = load_settings()

    middleware = []
    if settings.auth_enabled:
        middleware.append(Middleware(BearerAuthMiddleware, token=settings.auth_token))
    else:
        logger.warning(f"{AUTH_TOKEN_ENV} not set, serving without authentication")

    app = Starlette(
        routes=[
            Route(CHAT_COMPLETIONS_PATH, chat_completions, methods=ALL_METHODS),
            Route("/{path:path}", service_info, methods=ALL_METHODS),
        ],
        middleware=middleware,
        exception_handlers={GatewayError: _handle_gateway_error},
        lifespan=_lifespan,
    )
    app.state.settings = settings
    app.state.transport = transport
    return app
