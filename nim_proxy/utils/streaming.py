"""Streaming response utilities"""
from typing import AsyncIterator, Awaitable, Callable, Optional, Protocol

import httpx
from fastapi.responses import StreamingResponse

from nim_proxy.core.error_types import UPSTREAM_ERROR_STREAM
from nim_proxy.core.logging import get_logger
from nim_proxy.core.metrics import CLIENT_DISCONNECTS, STREAM_EVENTS, UPSTREAM_ERRORS
from nim_proxy.utils.sse import SSEReassembler
from nim_proxy.utils.transcoder import DATA_PREFIX, EventTranscoder

logger = get_logger()

SSE_HEADERS = {
    'Content-Type': 'text/event-stream',
    'Cache-Control': 'no-cache',
    'Connection': 'keep-alive',
}


class ByteStream(Protocol):
    """The part of an upstream response the stream pump relies on"""

    def aiter_bytes(self) -> AsyncIterator[bytes]: ...

    async def aclose(self) -> None: ...


async def stream_response(
    response: ByteStream,
    transcoder: EventTranscoder,
    disconnect_check: Optional[Callable[[], Awaitable[bool]]] = None,
    model: Optional[str] = None,
) -> AsyncIterator[bytes]:
    """Transcode an upstream SSE byte stream into OpenAI-compatible events

    Upstream chunks are pulled one at a time, so a slow caller pauses
    upstream reads instead of growing a buffer. The upstream response is
    closed however the stream ends, including cancellation when the caller
    disconnects.

    Args:
        response: Open upstream response
        transcoder: Event transcoder for this request
        disconnect_check: Optional async callable that returns True if client disconnected
        model: Caller's model name, for logging
    """
    reassembler = SSEReassembler()
    model_label = model or 'unknown'
    emitted = 0
    try:
        async for chunk in response.aiter_bytes():
            if disconnect_check is not None:
                try:
                    if await disconnect_check():
                        logger.debug(f"Client disconnected, stopping stream model={model_label}")
                        CLIENT_DISCONNECTS.inc()
                        return
                except Exception as e:
                    logger.debug(f"Error checking client disconnect: {e}")

            for line in reassembler.feed(chunk):
                result = transcoder.transcode(line)
                if result.done:
                    STREAM_EVENTS.labels(outcome='done').inc()
                    yield result.output
                    return
                if result.output is not None:
                    emitted += 1
                    STREAM_EVENTS.labels(outcome='emitted').inc()
                    yield result.output
                elif line.startswith(DATA_PREFIX):
                    STREAM_EVENTS.labels(outcome='dropped').inc()

        dropped = reassembler.close()
        if dropped:
            logger.debug(f"Discarded {dropped} unterminated bytes at end of stream model={model_label}")
    except httpx.HTTPError as e:
        # SSE has no error envelope; the caller just sees the stream end
        UPSTREAM_ERRORS.labels(kind=UPSTREAM_ERROR_STREAM).inc()
        logger.error(
            f"Upstream stream failed after {emitted} events model={model_label}: "
            f"{type(e).__name__}: {e}"
        )
    finally:
        await response.aclose()


def create_streaming_response(
    response: ByteStream,
    transcoder: EventTranscoder,
    disconnect_check: Optional[Callable[[], Awaitable[bool]]] = None,
    model: Optional[str] = None,
) -> StreamingResponse:
    """Create streaming response with proper cleanup"""
    return StreamingResponse(
        stream_response(response, transcoder, disconnect_check, model),
        headers=SSE_HEADERS,
    )
