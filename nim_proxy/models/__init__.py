"""Data models"""
from .chat import ChatRequest
from .config import (
    AppConfig,
    FeatureToggles,
    LoggingConfig,
    RequestDefaults,
    ServerConfig,
    UpstreamConfig,
)

__all__ = [
    "AppConfig",
    "ChatRequest",
    "FeatureToggles",
    "LoggingConfig",
    "RequestDefaults",
    "ServerConfig",
    "UpstreamConfig",
]
