"""HTTP clients for requests to the NIM upstream"""
import httpx

from nim_proxy.models.config import UpstreamConfig


def create_http_client(upstream: UpstreamConfig) -> httpx.AsyncClient:
    """
    Create a client for a single proxied request

    Each inbound request gets its own client so an upstream connection is
    never shared between callers; closing the client tears the connection
    down.

    Returns:
        httpx.AsyncClient configured from the upstream settings
    """
    return httpx.AsyncClient(
        verify=upstream.verify_ssl,
        timeout=float(upstream.request_timeout_secs),
        # Talk to the upstream directly, ignoring HTTP(S)_PROXY
        trust_env=False,
    )
