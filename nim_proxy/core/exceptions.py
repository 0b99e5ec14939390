"""Custom exceptions for the application"""
from typing import Any, Dict, Optional

from nim_proxy.core.error_types import ERROR_TYPE_PROXY, UPSTREAM_ERROR_MESSAGE


class ProxyError(Exception):
    """Error rendered to the caller as an OpenAI-style error envelope"""

    def __init__(
        self,
        message: str = UPSTREAM_ERROR_MESSAGE,
        status_code: int = 500,
        error_type: Optional[str] = ERROR_TYPE_PROXY,
    ):
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"message": self.message}
        if self.error_type:
            error["type"] = self.error_type
        return {"error": error}


class UpstreamError(ProxyError):
    """Raised when the NIM upstream cannot produce a usable response

    ``detail`` holds the operator-facing cause and is never sent to callers.
    """

    def __init__(self, detail: str, kind: str, status_code: Optional[int] = None):
        self.detail = detail
        self.kind = kind
        self.upstream_status = status_code
        super().__init__()

    def __str__(self) -> str:
        if self.upstream_status is not None:
            return f"{self.kind} error (HTTP {self.upstream_status}): {self.detail}"
        return f"{self.kind} error: {self.detail}"
