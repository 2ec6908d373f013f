"""Serve an ASGI application in-process as a RequestHandler."""

import logging
from typing import Any, Callable, Optional

import httpx

from core.interfaces import RequestHandler

logger = logging.getLogger(__name__)

# httpx decodes the body, so these would no longer describe it
DECODED_RESPONSE_HEADERS = ("content-encoding", "content-length")


class ASGIRequestHandler(RequestHandler):
    """RequestHandler backed by an ASGI application.

    Requests are sent through ``httpx.ASGITransport``; the client address is
    exposed to the application as the ASGI scope's ``client``. Lifespan
    events are not sent.
    """

    def __init__(self, app: Callable[..., Any], timeout: float = 30.0) -> None:
        """Initialize with an ASGI application.

        Args:
            app: ASGI application callable
            timeout: Per-request timeout in seconds
        """
        self.app = app
        self.timeout = timeout

    async def respond(
        self,
        request: httpx.Request,
        get_client_address: Callable[[], str],
    ) -> Optional[httpx.Response]:
        """Run the request through the ASGI application."""
        transport = httpx.ASGITransport(app=self.app, client=(get_client_address(), 0))

        async with httpx.AsyncClient(transport=transport, timeout=self.timeout) as client:
            response = await client.send(request)

        headers = [
            (key, value)
            for key, value in response.headers.multi_items()
            if key.lower() not in DECODED_RESPONSE_HEADERS
        ]
        return httpx.Response(
            status_code=response.status_code,
            headers=headers,
            content=response.content,
            request=request,
        )
