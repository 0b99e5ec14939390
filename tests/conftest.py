"""Shared test fixtures and configuration"""
import os
from typing import Callable, Iterator, List, Optional

import pytest
from fastapi.testclient import TestClient

from nim_proxy.models.config import AppConfig, FeatureToggles
from nim_proxy.services.upstream_service import UpstreamService

TEST_CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'config.test.yaml')

# Point the app at the test config so nothing reads the repo's config.yaml
os.environ['CONFIG_PATH'] = TEST_CONFIG_PATH

NIM_BASE = 'https://nim.test/v1'
NIM_CHAT_URL = f'{NIM_BASE}/chat/completions'


@pytest.fixture
def test_config_dict() -> dict:
    """Sample configuration dictionary for testing"""
    return {
        'server': {'host': '127.0.0.1', 'port': 3100},
        'upstream': {
            'api_base': NIM_BASE,
            'api_key': 'test-nim-key',
            'request_timeout_secs': 30,
        },
        'model_mapping': {
            'gpt-3.5-turbo': 'nvidia/llama-3.1-nemotron-ultra-253b-v1',
            'gpt-4': 'deepseek-ai/deepseek-v3.2',
            'gpt-4o': 'moonshotai/kimi-k2.5',
        },
        'fallback_model': 'meta/llama-3.1-8b-instruct',
    }


@pytest.fixture
def test_config(test_config_dict: dict) -> AppConfig:
    """Config with both feature toggles off"""
    return AppConfig(**test_config_dict)


@pytest.fixture
def reasoning_config(test_config_dict: dict) -> AppConfig:
    """Config with reasoning display and thinking mode on"""
    return AppConfig(
        **test_config_dict,
        features={'show_reasoning': True, 'enable_thinking_mode': True},
    )


@pytest.fixture
def features_off() -> FeatureToggles:
    return FeatureToggles()


@pytest.fixture
def features_on() -> FeatureToggles:
    return FeatureToggles(show_reasoning=True, enable_thinking_mode=True)


@pytest.fixture
def make_client() -> Iterator[Callable[[AppConfig], TestClient]]:
    """Build a TestClient whose dependencies use the given config"""
    from nim_proxy.api.dependencies import get_app_config, get_upstream_svc
    from nim_proxy.main import app

    def _make(config: AppConfig) -> TestClient:
        service = UpstreamService(config)
        app.dependency_overrides[get_app_config] = lambda: config
        app.dependency_overrides[get_upstream_svc] = lambda: service
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def app_client(make_client, test_config: AppConfig) -> TestClient:
    """FastAPI test client with toggles off"""
    return make_client(test_config)


@pytest.fixture
def reasoning_client(make_client, reasoning_config: AppConfig) -> TestClient:
    """FastAPI test client with toggles on"""
    return make_client(reasoning_config)


@pytest.fixture
def sample_chat_request() -> dict:
    """Sample chat completion request"""
    return {
        'model': 'gpt-4',
        'messages': [
            {'role': 'system', 'content': 'You are a helpful assistant.'},
            {'role': 'user', 'content': 'Hello!'}
        ],
        'temperature': 0.7,
        'max_tokens': 100
    }


@pytest.fixture
def sample_streaming_request(sample_chat_request: dict) -> dict:
    """Sample streaming request"""
    return {**sample_chat_request, 'stream': True}


class FakeUpstream:
    """Stands in for an open upstream response in stream tests"""

    def __init__(self, chunks: List[bytes], error: Optional[BaseException] = None):
        self.chunks = list(chunks)
        self.error = error
        self.pulled = 0
        self.closed = False

    async def aiter_bytes(self):
        for chunk in self.chunks:
            self.pulled += 1
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_upstream() -> Callable[..., FakeUpstream]:
    return FakeUpstream
