"""
Live integration tests against the real InstantSeek API.

These are NOT unit tests: they send real prompts over the network and depend
on InstantSeek accepting our browser headers. Skipped unless INSTANTSEEK_LIVE=1.

Run:
    INSTANTSEEK_LIVE=1 python -m pytest tests/test_live.py -v -m live
"""

import asyncio
import json
import os

import pytest
from starlette.testclient import TestClient

from instantseek2api.client import InstantSeekClient
from instantseek2api.config import load_settings
from instantseek2api.server import create_app

pytestmark = [
    pytest.mark.live,
    pytest.mark.skipif(os.getenv("INSTANTSEEK_LIVE") != "1", reason="set INSTANTSEEK_LIVE=1 to hit InstantSeek"),
]


def test_client_gets_reply():
    """A bare prompt should come back with text and a conversation id."""
    async def _ask():
        async with InstantSeekClient() as client:
            return await client.ask("Reply with exactly: TEST_OK")

    reply = asyncio.run(_ask())
    assert len(reply.response) > 0
    assert reply.conversation_id


def test_gateway_non_streaming():
    with TestClient(create_app(load_settings({}))) as client:
        resp = client.post(
            "/v1/chat/completions",
            json={"model": "deepseek-chat", "messages": [{"role": "user", "content": "Reply with exactly: GATEWAY_OK"}]},
        )
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"].startswith("chatcmpl-")
    assert len(data["choices"][0]["message"]["content"]) > 0


def test_gateway_streaming():
    with TestClient(create_app(load_settings({}))) as client:
        resp = client.post(
            "/v1/chat/completions",
            json={
                "model": "deepseek-chat",
                "messages": [{"role": "user", "content": "Reply with exactly: STREAM_OK"}],
                "stream": True,
            },
        )
    assert resp.status_code == 200
    chunks = [line[6:] for line in resp.text.split("\n") if line.startswith("data: ")]
    assert chunks[-1] == "[DONE]"
    assert json.loads(chunks[0])["choices"][0]["delta"]["role"] == "assistant"
