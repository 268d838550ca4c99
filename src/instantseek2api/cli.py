"""
Typer CLI application for InstantSeek2Api.

Commands:
    serve    Start the OpenAI-compatible API server
    ask      Send a single prompt to InstantSeek and print the reply

Usage:
    instantseek2api serve --port 8000 --verbose
    instantseek2api ask "What is the capital of France?"
"""

import asyncio
import sys

import typer
from loguru import logger

from .client import InstantSeekClient
from .config import load_settings
from .errors import UpstreamError

# Disable loguru output by default for clean CLI output.
# Re-enabled per-command with --verbose.
logger.remove()

app = typer.Typer(help="InstantSeek2Api: an OpenAI-compatible gateway for InstantSeek.")


@app.command()
def ask(
    prompt: str,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Send a prompt to InstantSeek and print the reply.

    Uses the same upstream URL and timeout as the server
    (INSTANTSEEK_UPSTREAM_URL, INSTANTSEEK_TIMEOUT).
    """
    if verbose:
        logger.add(sys.stderr, level="INFO")

    settings = load_settings()

    async def _ask():
        async with InstantSeekClient(settings.upstream_url, timeout=settings.timeout) as client:
            return await client.ask(prompt)

    try:
        reply = asyncio.run(_ask())
    except UpstreamError as e:
        print(f"Upstream error: {e.message}", file=sys.stderr)
        raise typer.Exit(1)

    print(reply.response)


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
    host: str = typer.Option("0.0.0.0", "--host", help="Host to bind to"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Start the OpenAI-compatible API server.

    Settings (AUTH_TOKEN, INSTANTSEEK_UPSTREAM_URL, INSTANTSEEK_TIMEOUT) are
    read once here, before uvicorn starts.

    Endpoints:
        POST /v1/chat/completions  Chat completion (streaming + non-streaming)
        *    /                     Service info
    """
    if verbose:
        logger.add(sys.stderr, level="INFO")

    from .server import create_app
    import uvicorn

    server_app = create_app(load_settings())
    print(f"\n  InstantSeek2Api server starting on http://{host}:{port}")
    print(f"  OpenAI endpoint: http://{host}:{port}/v1/chat/completions\n")
    uvicorn.run(server_app, host=host, port=port, log_level="info" if verbose else "warning")


if __name__ == "__main__":
    app()
