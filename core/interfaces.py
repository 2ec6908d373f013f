"""Core interfaces and data models for edgebridge.

This module defines the protocol-agnostic request/response models that every
wire format is translated to and from, and the abstract base class for the
request handler that ultimately serves forwarded requests.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

import httpx
from pydantic import BaseModel, Field


class EventProtocol(str, Enum):
    """Wire protocols an invocation can arrive in."""

    GATEWAY_V1 = "v1"
    GATEWAY_V2 = "v2"
    EDGE_FUNCTION = "cf"


HeaderValue = Union[str, List[str], None]


class Event(BaseModel):
    """Protocol-agnostic inbound request."""

    protocol: EventProtocol = Field(..., description="Wire protocol that produced this event")
    method: str = Field(..., description="HTTP method")
    raw_path: str = Field(..., description="Unescaped path component")
    url: str = Field(..., description="Path plus normalized query string")
    body: bytes = Field(default=b"", description="Raw request body")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Lower-cased header name to single value"
    )
    remote_address: str = Field(default="", description="Originating client IP")


class Result(BaseModel):
    """Protocol-agnostic outbound response."""

    protocol: EventProtocol = Field(..., description="Must match the originating event")
    status_code: int = Field(..., description="HTTP status code")
    headers: Dict[str, HeaderValue] = Field(
        default_factory=dict, description="Header name to one or many values"
    )
    body: str = Field(default="", description="Literal text or base64 text")
    is_base64_encoded: bool = Field(
        default=False, description="Whether body is base64 text of binary bytes"
    )


class RequestHandler(ABC):
    """Abstract base class for the application that serves forwarded requests.

    Implementations receive a fully synthesized request and return the
    application's response, or None when the application produced nothing.
    """

    @abstractmethod
    async def respond(
        self,
        request: httpx.Request,
        get_client_address: Callable[[], str],
    ) -> Optional[httpx.Response]:
        """Serve a single request.

        Args:
            request: Synthesized request (absolute URL, headers, optional body)
            get_client_address: Returns the originating client IP

        Returns:
            The application's response, or None
        """
        pass

    async def shutdown(self) -> None:
        """Release resources held by the handler."""
        return None
