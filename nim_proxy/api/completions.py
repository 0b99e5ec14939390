"""Chat completions API endpoint"""
from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from nim_proxy.api.dependencies import get_upstream_svc
from nim_proxy.core.exceptions import ProxyError, UpstreamError
from nim_proxy.core.logging import get_logger
from nim_proxy.models.chat import ChatRequest
from nim_proxy.services.upstream_service import UpstreamService
from nim_proxy.utils.streaming import create_streaming_response
from nim_proxy.utils.transcoder import transcode_completion

router = APIRouter()
logger = get_logger()


@router.post('/chat/completions')
async def chat_completions(
    request: Request,
    upstream_svc: UpstreamService = Depends(get_upstream_svc)
):
    """Translate an OpenAI chat completion request for the NIM upstream

    Every failure collapses to the same 500 envelope; the cause is logged.
    """
    try:
        data = await request.json()
        chat_request = ChatRequest.model_validate(data)
    except (ValueError, ValidationError) as e:
        logger.error(f"Unreadable chat completion request: {e}")
        raise ProxyError() from e

    original_model = chat_request.model
    # Store model in request state for metrics middleware
    request.state.model = original_model or 'unknown'

    payload = upstream_svc.build_request(chat_request)
    logger.debug(
        f"Chat completion model={original_model} -> {payload['model']} "
        f"stream={payload['stream']}"
    )

    try:
        if payload['stream']:
            upstream = await upstream_svc.open_stream(payload)
            return create_streaming_response(
                upstream,
                upstream_svc.transcoder,
                disconnect_check=request.is_disconnected,
                model=original_model,
            )

        body = await upstream_svc.complete(payload)
        return JSONResponse(
            content=transcode_completion(body, original_model, upstream_svc.config.features)
        )
    except UpstreamError as e:
        logger.error(f"Upstream NIM error for model {original_model}: {e}")
        raise
    except Exception as e:
        logger.exception(f"Unexpected error for model {original_model}")
        raise ProxyError() from e
