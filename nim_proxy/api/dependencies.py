"""API dependencies"""
from nim_proxy.core.config import get_config
from nim_proxy.models.config import AppConfig
from nim_proxy.services.upstream_service import get_upstream_service, UpstreamService


def get_app_config() -> AppConfig:
    """Get configuration dependency"""
    return get_config()


def get_upstream_svc() -> UpstreamService:
    """Get upstream service dependency"""
    return get_upstream_service()
