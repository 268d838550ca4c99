"""
InstantSeek2Api: an OpenAI-compatible gateway for the InstantSeek chat service.

Accepts OpenAI chat-completions requests, forwards the latest message to
InstantSeek, and answers in the OpenAI format (plain JSON or SSE chunks).

Public API:
    from instantseek2api import InstantSeekClient, create_app

    async with InstantSeekClient() as client:
        reply = await client.ask("Hello!")
"""

from .client import InstantSeekClient
from .server import create_app

__all__ = ["InstantSeekClient", "create_app"]
