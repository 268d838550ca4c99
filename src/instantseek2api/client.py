"""
Async client for the InstantSeek chat API.

InstantSeek only answers requests that look like they come from its own web
page, so every call carries a fixed set of browser headers (Edge 133 on
Windows). The header values are an opaque constant: keep them verbatim.

Usage as context manager (recommended):
    async with InstantSeekClient() as client:
        reply = await client.ask("What is the capital of France?")
        print(reply.response)

Usage without context manager:
    client = InstantSeekClient()
    reply = await client.ask("Hello!")
    await client.close()
"""

from typing import Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from .config import DEFAULT_TIMEOUT, DEFAULT_UPSTREAM_URL
from .errors import UpstreamError
from .schemas import UpstreamRequest, UpstreamResponse

UPSTREAM_HEADERS = {
    "sec-ch-ua-platform": "Windows",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36 Edg/133.0.0.0",
    "sec-ch-ua": "\"Not(A:Brand\";v=\"99\", \"Microsoft Edge\";v=\"133\", \"Chromium\";v=\"133\"",
    "Content-Type": "application/json",
    "sec-ch-ua-mobile": "?0",
    "Accept": "*/*",
    "Sec-Fetch-Site": "same-origin",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Dest": "empty",
}


def upstream_headers(upstream_url: str) -> dict[str, str]:
    """Return the browser header set for ``upstream_url``, including its host."""
    headers = dict(UPSTREAM_HEADERS)
    headers["host"] = httpx.URL(upstream_url).host
    return headers


class InstantSeekClient:
    """Sends single-turn prompts to InstantSeek over one pooled httpx client.

    Attributes:
        upstream_url (str): The InstantSeek chat endpoint.
        timeout (float): Per-request timeout in seconds.
    """

    def __init__(
        self,
        upstream_url: str = DEFAULT_UPSTREAM_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            upstream_url: Full URL of the upstream chat endpoint.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport; tests pass an
                       ``httpx.MockTransport`` here.
        """
        self.upstream_url = upstream_url
        self.timeout = timeout
        self._http = httpx.AsyncClient(
            headers=upstream_headers(upstream_url),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def send(self, req: UpstreamRequest) -> UpstreamResponse:
        """POST one request upstream and decode the reply.

        Args:
            req: The upstream request body.

        Returns:
            UpstreamResponse: The decoded reply.

        Raises:
            UpstreamError: On transport failure, a non-2xx status, or a body
                           that is not a valid InstantSeek reply.
        """
        try:
            resp = await self._http.post(
                self.upstream_url,
                content=req.model_dump_json(by_alias=True),
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Upstream request failed: {e}")
            raise UpstreamError(str(e)) from e

        try:
            reply = UpstreamResponse.model_validate_json(resp.content)
        except ValidationError as e:
            logger.error(f"Undecodable upstream body: {resp.text[:200]}")
            raise UpstreamError(str(e)) from e

        logger.info(f"Upstream replied ({len(reply.response)} chars, conversation {reply.conversation_id})")
        return reply

    async def ask(self, prompt: str) -> UpstreamResponse:
        """Send a prompt as a fresh conversation and return the reply."""
        return await self.send(UpstreamRequest(message=prompt))

    async def close(self):
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()
