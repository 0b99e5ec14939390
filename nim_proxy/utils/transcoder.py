"""NIM to OpenAI response transcoding

Streaming events and complete responses go through the same content rule:
with ``show_reasoning`` on, a non-empty ``reasoning_content`` is prepended to
the visible content wrapped in ``<think>`` tags.
"""
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from nim_proxy.core.logging import get_logger
from nim_proxy.models.config import FeatureToggles

logger = get_logger()

DATA_PREFIX = b'data:'
DONE_SENTINEL = b'[DONE]'
DONE_EVENT = b'data: [DONE]\n\n'

THINK_OPEN = '<think>'
THINK_CLOSE = '</think>'


def merge_reasoning(content: Any, reasoning: Any, show_reasoning: bool) -> Any:
    """Combine visible and reasoning text into one content string"""
    if show_reasoning and reasoning:
        return f"{THINK_OPEN}{reasoning}{THINK_CLOSE}\n\n{content if content is not None else ''}"
    return content


def encode_event(event: Dict[str, Any]) -> bytes:
    """Serialize one event as an SSE data frame"""
    payload = json.dumps(event, ensure_ascii=False, separators=(',', ':'))
    return f"data: {payload}\n\n".encode('utf-8')


@dataclass(frozen=True)
class TranscodedLine:
    """Result of transcoding one SSE line

    ``output`` is None when the line produces nothing; ``done`` is set once
    the terminal sentinel has been seen.
    """
    output: Optional[bytes] = None
    done: bool = False

    @property
    def dropped(self) -> bool:
        return self.output is None and not self.done


IGNORED = TranscodedLine()


class EventTranscoder:
    """Rewrites upstream SSE lines into OpenAI-compatible delta events

    Holds no per-stream state; one instance may serve every request.
    """

    def __init__(self, features: FeatureToggles):
        self._features = features

    @property
    def features(self) -> FeatureToggles:
        return self._features

    def transcode(self, line: bytes) -> TranscodedLine:
        if not line.startswith(DATA_PREFIX):
            return IGNORED

        payload = line[len(DATA_PREFIX):].strip()
        if payload == DONE_SENTINEL:
            return TranscodedLine(output=DONE_EVENT, done=True)

        try:
            event = json.loads(payload.decode('utf-8'))
        except (UnicodeDecodeError, ValueError):
            logger.debug(f"Dropping malformed upstream event: {payload[:200]!r}")
            return IGNORED

        if not isinstance(event, dict):
            return IGNORED

        choices = event.get('choices')
        if not isinstance(choices, list) or not choices:
            # Nothing to rewrite: usage-only or keep-alive events
            return IGNORED

        first = choices[0]
        if not isinstance(first, dict):
            return IGNORED

        delta = first.get('delta')
        if not isinstance(delta, dict):
            delta = {}

        content = delta.get('content')
        if content is None:
            content = ''
        reasoning = delta.get('reasoning_content') if self._features.show_reasoning else None

        first['delta'] = {'content': merge_reasoning(content, reasoning, self._features.show_reasoning)}
        return TranscodedLine(output=encode_event(event))


def transcode_choice(choice: Dict[str, Any], show_reasoning: bool) -> Dict[str, Any]:
    message = choice.get('message')
    if not isinstance(message, dict):
        message = {}
    return {
        'index': choice.get('index'),
        'message': {
            'role': 'assistant',
            'content': merge_reasoning(
                message.get('content'),
                message.get('reasoning_content'),
                show_reasoning,
            ),
        },
        'finish_reason': choice.get('finish_reason'),
    }


def transcode_completion(
    upstream_body: Dict[str, Any],
    original_model: Optional[str],
    features: FeatureToggles,
    now: Optional[float] = None,
) -> Dict[str, Any]:
    """Reshape a complete NIM chat completion into the OpenAI shape

    The caller's requested model name is echoed back rather than the NIM id.
    """
    if now is None:
        now = time.time()

    choices = upstream_body.get('choices')
    if not isinstance(choices, list):
        choices = []

    transcoded: List[Dict[str, Any]] = [
        transcode_choice(choice, features.show_reasoning)
        for choice in choices
        if isinstance(choice, dict)
    ]

    usage = upstream_body.get('usage')
    return {
        'id': f"chatcmpl-{int(now * 1000)}",
        'object': 'chat.completion',
        'created': int(now),
        'model': original_model,
        'choices': transcoded,
        'usage': usage if usage is not None else {},
    }
