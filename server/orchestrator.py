"""Request orchestration for edgebridge.

Takes a raw Lambda event, serves prerendered pages directly when possible,
otherwise forwards the request to the application, and translates the
outcome back into the wire format the event arrived in.
"""

import base64
import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from core.binary import is_binary_content_type
from core.config_schema import BridgeConfig
from core.event_mapper import convert_from, convert_to
from core.handler_loader import load_request_handler
from core.interfaces import Event, EventProtocol, RequestHandler, Result
from core.logging_utils import format_event_log, format_request_log, format_response_log
from core.prerendered import PrerenderedFiles

logger = logging.getLogger(__name__)

PRERENDERED_CACHE_CONTROL = "public, max-age=0, s-maxage=31536000, must-revalidate"
NOT_FOUND_BODY = "Not found."
BODYLESS_METHODS = ("GET", "HEAD")


class RequestOrchestrator:
    """Drives one invocation from raw event to wire response.

    The orchestrator holds no per-request state; the same instance is reused
    across warm invocations.
    """

    def __init__(
        self,
        handler: RequestHandler,
        prerendered: Optional[PrerenderedFiles] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            handler: Application that serves forwarded requests
            prerendered: Known prerendered pages (none if omitted)
        """
        self.handler = handler
        self.prerendered = prerendered if prerendered is not None else PrerenderedFiles([])

    @classmethod
    def from_config(cls, config: BridgeConfig) -> "RequestOrchestrator":
        """Build an orchestrator from validated configuration.

        Raises:
            ImportError: If the application cannot be imported
            ValueError: If the application reference or manifest is unusable
        """
        prerendered_config = config.prerendered
        if prerendered_config.manifest:
            prerendered = PrerenderedFiles.from_manifest(
                prerendered_config.manifest, prerendered_config.directory
            )
        else:
            prerendered = PrerenderedFiles.from_directory(prerendered_config.directory)

        return cls(load_request_handler(config.app), prerendered)

    async def handle_event(self, event: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        """Handle a single Lambda event.

        Args:
            event: Raw API Gateway v1/v2 or CloudFront event
            request_id: Optional request ID for logging/tracing

        Returns:
            Wire response for the event's protocol, or for a prerendered page
            on CloudFront, the rewritten CloudFront request

        Raises:
            UnsupportedEventKind: If the event matches no known protocol
            AssetReadFailure: If a prerendered page cannot be read
        """
        request_id = request_id or "unknown"

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Inbound event", extra=format_event_log(request_id, event))

        internal_event = convert_from(event)

        # The application must see the public host, not the internal one
        forwarded_host = internal_event.headers.get("x-forwarded-host")
        if forwarded_host:
            internal_event.headers["host"] = forwarded_host

        if internal_event.method == "GET":
            file_path = self.prerendered.resolve(internal_event.raw_path)
            if file_path:
                logger.info(
                    "Serving prerendered file",
                    extra={
                        "request_id": request_id,
                        "protocol": internal_event.protocol.value,
                        "request_path": internal_event.raw_path,
                        "file_path": file_path,
                    },
                )
                if internal_event.protocol == EventProtocol.EDGE_FUNCTION:
                    return self._format_cloudfront_prerendered_request(event, file_path)
                return self._format_prerendered_response(internal_event, file_path)

        return await self._forward(internal_event, request_id)

    def _format_cloudfront_prerendered_request(self, event: Dict[str, Any], file_path: str) -> Dict[str, Any]:
        """Point the CloudFront request at the prerendered page.

        CloudFront then fetches it from the static origin itself.
        """
        request = event["Records"][0]["cf"]["request"]
        request["uri"] = f"/{file_path}"
        return request

    def _format_prerendered_response(self, internal_event: Event, file_path: str) -> Dict[str, Any]:
        """Build an API Gateway response carrying the prerendered page."""
        return convert_to(
            Result(
                protocol=internal_event.protocol,
                status_code=200,
                headers={
                    "content-type": "text/html",
                    "cache-control": PRERENDERED_CACHE_CONTROL,
                },
                body=self.prerendered.read(file_path),
                is_base64_encoded=False,
            )
        )

    async def _forward(self, internal_event: Event, request_id: str) -> Dict[str, Any]:
        """Forward the event to the application and translate its response."""
        host = internal_event.headers.get("host") or "localhost"
        request = httpx.Request(
            internal_event.method,
            f"https://{host}{internal_event.url}",
            # Gateway header values may carry non-ASCII text
            headers=httpx.Headers(internal_event.headers, encoding="utf-8"),
            content=None if internal_event.method in BODYLESS_METHODS else internal_event.body,
        )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Forwarding request",
                extra=format_request_log(request_id, request, internal_event.remote_address),
            )

        start_time = time.perf_counter()
        response = await self.handler.respond(request, lambda: internal_event.remote_address)
        duration_ms = (time.perf_counter() - start_time) * 1000

        if response is None:
            logger.warning(
                "Application produced no response",
                extra={
                    "request_id": request_id,
                    "request_path": internal_event.raw_path,
                    "http_method": internal_event.method,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            return convert_to(
                Result(
                    protocol=internal_event.protocol,
                    status_code=404,
                    headers={"content-type": "text/plain"},
                    body=NOT_FOUND_BODY,
                    is_base64_encoded=False,
                )
            )

        result = await self._to_result(internal_event.protocol, response)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Application response",
                extra=format_response_log(
                    request_id=request_id,
                    status_code=result.status_code,
                    headers=result.headers,
                    is_base64_encoded=result.is_base64_encoded,
                    body_length=len(result.body),
                    duration_ms=duration_ms,
                ),
            )

        return convert_to(result)

    @staticmethod
    async def _to_result(protocol: EventProtocol, response: httpx.Response) -> Result:
        """Collapse an application response into a Result."""
        await response.aread()

        headers = collect_headers(response.headers.multi_items())
        content_type = headers.get("content-type", [None])[0]
        is_base64_encoded = is_binary_content_type(content_type)

        if is_base64_encoded:
            body = base64.b64encode(response.content).decode("ascii")
        else:
            body = response.text

        return Result(
            protocol=protocol,
            status_code=response.status_code,
            headers=headers,
            body=body,
            is_base64_encoded=is_base64_encoded,
        )


def collect_headers(items: Iterable[Tuple[str, str]]) -> Dict[str, List[str]]:
    """Group (name, value) pairs into name -> all values, in order."""
    headers: Dict[str, List[str]] = {}
    for key, value in items:
        headers.setdefault(key, []).append(value)
    return headers
