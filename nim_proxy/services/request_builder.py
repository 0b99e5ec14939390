"""Upstream request body construction"""
from typing import Any, Dict

from nim_proxy.models.chat import ChatRequest
from nim_proxy.models.config import FeatureToggles, RequestDefaults


def thinking_directive() -> Dict[str, Any]:
    """Extra body asking the NIM chat template to run in thinking mode"""
    return {'chat_template_kwargs': {'thinking': True}}


def build_upstream_request(
    chat_request: ChatRequest,
    upstream_model: str,
    features: FeatureToggles,
    defaults: RequestDefaults,
) -> Dict[str, Any]:
    """Build the JSON body sent to ``{api_base}/chat/completions``

    Only missing values get defaults; an explicit ``temperature: 0`` is kept.
    Messages are forwarded untouched.
    """
    body: Dict[str, Any] = {
        'model': upstream_model,
        'messages': chat_request.messages,
        'temperature': (
            chat_request.temperature
            if chat_request.temperature is not None
            else defaults.temperature
        ),
        'max_tokens': (
            chat_request.max_tokens
            if chat_request.max_tokens is not None
            else defaults.max_tokens
        ),
        'stream': bool(chat_request.stream),
    }
    if features.enable_thinking_mode:
        body['extra_body'] = thinking_directive()
    return body
