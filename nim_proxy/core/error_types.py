"""Shared constants for structured API errors."""

# Error type constants (for client-facing error responses)
ERROR_TYPE_PROXY = "proxy_error"

# Client-facing messages; causes are only logged
UPSTREAM_ERROR_MESSAGE = "Upstream NIM error"
NOT_FOUND_MESSAGE = "Not found"

# Upstream failure kinds (metrics labels)
UPSTREAM_ERROR_TRANSPORT = "transport"
UPSTREAM_ERROR_STATUS = "status"
UPSTREAM_ERROR_DECODE = "decode"
UPSTREAM_ERROR_STREAM = "stream"
