"""Models API endpoints"""
from fastapi import APIRouter, Depends

from nim_proxy.api.dependencies import get_upstream_svc
from nim_proxy.services.upstream_service import UpstreamService

router = APIRouter()

OWNED_BY = 'nvidia-nim-proxy'


@router.get('/models')
async def list_models(upstream_svc: UpstreamService = Depends(get_upstream_svc)):
    """List the caller-facing model names (OpenAI compatible)"""
    models_list = [
        {
            'id': model,
            'object': 'model',
            'owned_by': OWNED_BY,
        }
        for model in upstream_svc.mapper.model_names()
    ]

    return {'object': 'list', 'data': models_list}
