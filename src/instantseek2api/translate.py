"""
Schema translation between the OpenAI chat-completions format and InstantSeek.

InstantSeek answers one message at a time and returns the whole reply in a
single JSON body, so translation is a pure mapping in both directions:

    ChatCompletionRequest  -> UpstreamRequest       (last message only)
    UpstreamResponse       -> ChatCompletionResponse
    ChatCompletionResponse -> SSE chunks            (role, content, stop, [DONE])
"""

import time
from typing import Optional

from .errors import InvalidRequest, UnsupportedModel
from .schemas import (
    SUPPORTED_MODEL,
    ChatCompletionChoice,
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    DeltaContent,
    StreamChoice,
    UpstreamRequest,
    UpstreamResponse,
)

COMPLETION_ID_PREFIX = "chatcmpl-"
EVENT_STREAM = "text/event-stream"
DONE_SENTINEL = "[DONE]"


def build_upstream_request(req: ChatCompletionRequest) -> UpstreamRequest:
    """Validate an OpenAI request and turn it into an InstantSeek request.

    Only the content of the last message is forwarded; earlier turns are
    dropped and no upstream conversation is continued.

    Args:
        req: The parsed OpenAI chat-completions request.

    Returns:
        UpstreamRequest: The body to POST upstream, with a null conversationId.

    Raises:
        UnsupportedModel: If ``req.model`` is not the supported model.
        InvalidRequest: If ``req.messages`` is empty.
    """
    if req.model != SUPPORTED_MODEL:
        raise UnsupportedModel(f"Only {SUPPORTED_MODEL} model is supported")
    if not req.messages:
        raise InvalidRequest("messages must be non-empty")

    return UpstreamRequest(message=req.messages[-1].content)


def build_completion(reply: UpstreamResponse, created: Optional[int] = None) -> ChatCompletionResponse:
    """Wrap an upstream reply in an OpenAI ``chat.completion`` object."""
    if created is None:
        created = int(time.time())

    return ChatCompletionResponse(
        id=COMPLETION_ID_PREFIX + reply.conversation_id,
        created=created,
        model=SUPPORTED_MODEL,
        choices=[
            ChatCompletionChoice(
                message=ChatMessage(role="assistant", content=reply.response)
            )
        ],
    )


def wants_stream(req: ChatCompletionRequest, accept: Optional[str]) -> bool:
    """Streaming is on when the body asks for it or the client only accepts SSE."""
    return req.stream or accept == EVENT_STREAM


def build_stream_events(completion: ChatCompletionResponse) -> list[str]:
    """Serialize a completion as the data payloads of an OpenAI SSE stream.

    The upstream reply is already complete, so the stream is a fixed
    sequence rather than token-by-token deltas:

      1. role chunk: delta={"role": "assistant"}
      2. content chunk: delta={"content": <full reply>}
      3. terminal chunk: empty delta, finish_reason="stop"
      4. the ``[DONE]`` sentinel

    Every payload is serialized here, before anything is written to the
    client, so a stream is never left half-written.

    Args:
        completion: The non-streaming completion built from the upstream reply.

    Returns:
        list[str]: The four ``data:`` payloads, in emission order.
    """
    answer = completion.choices[0].message.content
    deltas = [
        StreamChoice(delta=DeltaContent(role="assistant")),
        StreamChoice(delta=DeltaContent(content=answer)),
        StreamChoice(delta=DeltaContent(), finish_reason="stop"),
    ]

    events = []
    for choice in deltas:
        chunk = ChatCompletionChunk(
            id=completion.id,
            created=completion.created,
            model=completion.model,
            choices=[choice],
        )
        events.append(chunk.model_dump_json(exclude_none=True))
    events.append(DONE_SENTINEL)
    return events
