"""
Probe the InstantSeek chat endpoint directly, without the gateway.

Sends one prompt with the gateway's browser header set and prints the raw
status, headers and body. Useful when the upstream starts rejecting requests
and the header constant needs refreshing.

Usage:
    python tests_http/01_probe_upstream.py "Reply with exactly: PROBE_OK"
"""
import asyncio
import json
import sys

import httpx

from instantseek2api.client import upstream_headers
from instantseek2api.config import load_settings


async def probe(prompt: str):
    settings = load_settings()
    headers = upstream_headers(settings.upstream_url)

    print(f"POST {settings.upstream_url}")
    for name, value in headers.items():
        print(f"  {name}: {value}")
    print()

    async with httpx.AsyncClient(headers=headers, timeout=settings.timeout) as client:
        resp = await client.post(
            settings.upstream_url,
            content=json.dumps({"message": prompt, "conversationId": None}),
        )

    print(f"Status: {resp.status_code}")
    print(f"Content-Type: {resp.headers.get('content-type', '?')}")
    try:
        print(json.dumps(resp.json(), indent=2, ensure_ascii=False))
    except json.JSONDecodeError:
        print(f"Body (not JSON): {resp.text[:500]}")


if __name__ == "__main__":
    asyncio.run(probe(sys.argv[1] if len(sys.argv) > 1 else "Hello!"))
