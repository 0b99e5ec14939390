"""Health check endpoint"""
from fastapi import APIRouter, Depends

from nim_proxy.api.dependencies import get_app_config
from nim_proxy.models.config import AppConfig

router = APIRouter()

SERVICE_NAME = 'OpenAI → NVIDIA NIM Proxy'


@router.get('/health')
async def health(config: AppConfig = Depends(get_app_config)):
    """Basic health check endpoint"""
    return {
        'status': 'ok',
        'service': SERVICE_NAME,
        'reasoning': config.features.show_reasoning,
        'thinking': config.features.enable_thinking_mode,
    }
