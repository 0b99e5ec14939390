"""Chat completion request model"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Inbound OpenAI-style chat completion request

    Messages are opaque to the proxy and forwarded as received. Unknown
    fields are tolerated and ignored.
    """
    model_config = ConfigDict(extra='ignore')

    model: Optional[str] = None
    messages: List[Any] = Field(default_factory=list)
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    stream: Any = None
