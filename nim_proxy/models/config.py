"""Configuration models"""
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODEL_MAPPING: Dict[str, str] = {
    'gpt-3.5-turbo': 'nvidia/llama-3.1-nemotron-ultra-253b-v1',
    'gpt-4': 'deepseek-ai/deepseek-v3.2',
    'gpt-4-turbo': 'moonshotai/kimi-k2-instruct-0905',
    'gpt-4o': 'moonshotai/kimi-k2.5',
    'claude-3-opus': 'z-ai/glm4.7',
    'claude-3-sonnet': 'openai/gpt-oss-20b',
    'gemini-pro': 'z-ai/glm5',
}

DEFAULT_FALLBACK_MODEL = 'meta/llama-3.1-8b-instruct'


class ServerConfig(BaseModel):
    """Server configuration"""
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 3000


class UpstreamConfig(BaseModel):
    """NIM upstream configuration"""
    model_config = ConfigDict(frozen=True)

    api_base: str = "https://integrate.api.nvidia.com/v1"
    api_key: Optional[str] = None
    request_timeout_secs: int = Field(default=300, ge=1)
    verify_ssl: bool = True


class FeatureToggles(BaseModel):
    """Deploy-time feature toggles"""
    model_config = ConfigDict(frozen=True)

    # Splice reasoning_content into the visible content as <think>...</think>
    show_reasoning: bool = False
    # Ask the upstream chat template to run in thinking mode
    enable_thinking_mode: bool = False


class RequestDefaults(BaseModel):
    """Defaults applied to fields the caller left out"""
    model_config = ConfigDict(frozen=True)

    temperature: float = Field(default=0.6, ge=0.0, le=1.0)
    max_tokens: int = Field(default=4096, ge=1)


class LoggingConfig(BaseModel):
    """Logging configuration"""
    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    file: Optional[str] = None


class AppConfig(BaseModel):
    """Application configuration"""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    server: ServerConfig = Field(default_factory=ServerConfig)
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    features: FeatureToggles = Field(default_factory=FeatureToggles)
    defaults: RequestDefaults = Field(default_factory=RequestDefaults)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    model_mapping: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_MODEL_MAPPING))
    fallback_model: str = Field(default=DEFAULT_FALLBACK_MODEL, min_length=1)
