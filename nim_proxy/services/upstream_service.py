"""NIM upstream client service"""
import time
from typing import Any, AsyncIterator, Callable, Dict, Optional

import httpx

from nim_proxy.core.config import get_config
from nim_proxy.core.error_types import (
    UPSTREAM_ERROR_DECODE,
    UPSTREAM_ERROR_STATUS,
    UPSTREAM_ERROR_TRANSPORT,
)
from nim_proxy.core.exceptions import UpstreamError
from nim_proxy.core.http_client import create_http_client
from nim_proxy.core.logging import get_logger
from nim_proxy.core.metrics import UPSTREAM_ERRORS, UPSTREAM_LATENCY
from nim_proxy.models.chat import ChatRequest
from nim_proxy.models.config import AppConfig, UpstreamConfig
from nim_proxy.services.model_mapper import ModelMapper
from nim_proxy.services.request_builder import build_upstream_request
from nim_proxy.utils.transcoder import EventTranscoder

logger = get_logger()

ClientFactory = Callable[[UpstreamConfig], httpx.AsyncClient]


class UpstreamStream:
    """An open streaming response together with the client that owns it"""

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self._client = client
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    def aiter_bytes(self) -> AsyncIterator[bytes]:
        return self._response.aiter_bytes()

    async def aclose(self) -> None:
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


class UpstreamService:
    """Translates chat requests for the NIM gateway and sends them"""

    def __init__(self, config: AppConfig, client_factory: ClientFactory = create_http_client):
        self._config = config
        self._client_factory = client_factory
        self.mapper = ModelMapper(config.model_mapping, config.fallback_model)
        self.transcoder = EventTranscoder(config.features)

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def url(self) -> str:
        return f"{self._config.upstream.api_base.rstrip('/')}/chat/completions"

    def build_request(self, chat_request: ChatRequest) -> Dict[str, Any]:
        """Map the model and build the upstream body"""
        upstream_model = self.mapper.resolve(chat_request.model)
        return build_upstream_request(
            chat_request,
            upstream_model,
            self._config.features,
            self._config.defaults,
        )

    def headers(self, stream: bool) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer {self._config.upstream.api_key or ''}",
            'Content-Type': 'application/json',
            'Accept': 'text/event-stream' if stream else 'application/json',
        }

    async def complete(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a non-streaming request and return the parsed JSON body"""
        start_time = time.time()
        async with self._client_factory(self._config.upstream) as client:
            try:
                response = await client.post(self.url, json=payload, headers=self.headers(stream=False))
            except httpx.HTTPError as e:
                raise self._error(f"{type(e).__name__}: {e}", UPSTREAM_ERROR_TRANSPORT) from e

        UPSTREAM_LATENCY.labels(stream='false').observe(time.time() - start_time)

        if response.is_error:
            raise self._error(response.text[:500], UPSTREAM_ERROR_STATUS, response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise self._error(f"invalid JSON body: {e}", UPSTREAM_ERROR_DECODE, response.status_code) from e

        if not isinstance(body, dict):
            raise self._error(f"unexpected body type {type(body).__name__}", UPSTREAM_ERROR_DECODE)
        return body

    async def open_stream(self, payload: Dict[str, Any]) -> UpstreamStream:
        """Send a streaming request and return once response headers arrive

        The caller owns the returned stream and must close it.
        """
        start_time = time.time()
        client = self._client_factory(self._config.upstream)
        try:
            request = client.build_request('POST', self.url, json=payload, headers=self.headers(stream=True))
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            raise self._error(f"{type(e).__name__}: {e}", UPSTREAM_ERROR_TRANSPORT) from e

        UPSTREAM_LATENCY.labels(stream='true').observe(time.time() - start_time)

        if response.is_error:
            try:
                detail = (await response.aread()).decode('utf-8', errors='replace')[:500]
            except httpx.HTTPError:
                detail = ''
            finally:
                await response.aclose()
                await client.aclose()
            raise self._error(detail, UPSTREAM_ERROR_STATUS, response.status_code)

        return UpstreamStream(client, response)

    @staticmethod
    def _error(detail: str, kind: str, status_code: Optional[int] = None) -> UpstreamError:
        UPSTREAM_ERRORS.labels(kind=kind).inc()
        return UpstreamError(detail, kind, status_code)


_upstream_service: Optional[UpstreamService] = None


def get_upstream_service() -> UpstreamService:
    """Get singleton upstream service instance"""
    global _upstream_service
    if _upstream_service is None:
        _upstream_service = UpstreamService(get_config())
    return _upstream_service


def reset_upstream_service() -> None:
    """Drop the singleton so the next call picks up fresh configuration"""
    global _upstream_service
    _upstream_service = None
