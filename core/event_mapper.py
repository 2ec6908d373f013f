"""Translation between Lambda wire formats and the internal event model.

Inbound, each supported wire format (API Gateway v1, API Gateway v2 and
CloudFront request events) is converted to an ``Event``. Outbound, a
``Result`` is converted to the response shape of the protocol recorded on it.
"""

import base64
import json
import logging
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

from core.classifier import UnsupportedEventKind, classify_event
from core.interfaces import Event, EventProtocol, HeaderValue, Result
from core.logging_utils import sanitize_dict

logger = logging.getLogger(__name__)

__all__ = ["UnsupportedEventKind", "convert_from", "convert_to"]


def convert_from(event: Mapping[str, Any]) -> Event:
    """Convert an API Gateway or CloudFront event to an internal event.

    Args:
        event: Raw Lambda event

    Returns:
        Internal Event tagged with the originating protocol

    Raises:
        UnsupportedEventKind: If the event matches no known protocol
    """
    protocol = classify_event(event)
    return _INBOUND_CONVERTERS[protocol](event)


def convert_to(result: Result) -> Dict[str, Any]:
    """Convert an internal result to the response shape of its protocol.

    Args:
        result: Internal Result

    Returns:
        API Gateway v1, API Gateway v2 or CloudFront response dictionary

    Raises:
        UnsupportedEventKind: If the result's protocol tag is unknown
    """
    converter = _OUTBOUND_CONVERTERS.get(result.protocol)
    if converter is None:
        raise UnsupportedEventKind(f"Unsupported event type: {result.protocol!r}")

    response = converter(result)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Converted result",
            extra={"protocol": str(result.protocol), "response": sanitize_dict(response)},
        )
    return response


# Inbound


def convert_from_gateway_v1_event(event: Mapping[str, Any]) -> Event:
    """Convert an API Gateway v1 (REST / payload 1.0) event."""
    path = event.get("path") or ""
    request_context = event.get("requestContext") or {}
    identity = request_context.get("identity") or {}
    return Event(
        protocol=EventProtocol.GATEWAY_V1,
        method=event.get("httpMethod") or "",
        raw_path=path,
        url=path + _normalize_gateway_v1_query(event),
        body=_decode_body(event.get("body"), bool(event.get("isBase64Encoded"))),
        headers=_normalize_gateway_v1_headers(event),
        remote_address=identity.get("sourceIp") or "",
    )


def convert_from_gateway_v2_event(event: Mapping[str, Any]) -> Event:
    """Convert an API Gateway payload format 2.0 event."""
    raw_path = event.get("rawPath") or ""
    raw_query_string = event.get("rawQueryString") or ""
    http_context = (event.get("requestContext") or {}).get("http") or {}
    return Event(
        protocol=EventProtocol.GATEWAY_V2,
        method=http_context.get("method") or "",
        raw_path=raw_path,
        url=raw_path + (f"?{raw_query_string}" if raw_query_string else ""),
        body=_normalize_gateway_v2_body(event),
        headers=_normalize_gateway_v2_headers(event),
        remote_address=http_context.get("sourceIp") or "",
    )


def convert_from_cloudfront_event(event: Mapping[str, Any]) -> Event:
    """Convert a CloudFront (Lambda@Edge) request event."""
    request = event["Records"][0]["cf"].get("request") or {}
    uri = request.get("uri") or ""
    querystring = request.get("querystring") or ""
    body = request.get("body") or {}
    return Event(
        protocol=EventProtocol.EDGE_FUNCTION,
        method=request.get("method") or "",
        raw_path=uri,
        url=uri + (f"?{querystring}" if querystring else ""),
        body=_decode_body(body.get("data"), body.get("encoding") == "base64"),
        headers=_normalize_cloudfront_headers(request.get("headers")),
        remote_address=request.get("clientIp") or "",
    )


def _decode_body(body: Optional[str], is_base64_encoded: bool) -> bytes:
    if not body:
        return b""
    if is_base64_encoded:
        return _lenient_b64decode(body)
    return body.encode("utf-8")


def _lenient_b64decode(data: str) -> bytes:
    """Decode base64 ignoring whitespace and missing padding.

    URL-safe characters are accepted too. A dangling single character
    carries no complete byte and is dropped.
    """
    compact = "".join(data.split()).rstrip("=")
    if len(compact) % 4 == 1:
        compact = compact[:-1]
    return base64.b64decode(compact + "=" * (-len(compact) % 4), altchars=b"-_")


def _normalize_gateway_v1_query(event: Mapping[str, Any]) -> str:
    """Rebuild the query string, multi-value parameters first."""
    params: List[Tuple[str, str]] = []

    for key, values in (event.get("multiValueQueryStringParameters") or {}).items():
        if values is not None:
            params.extend((key, value) for value in values)

    for key, value in (event.get("queryStringParameters") or {}).items():
        if value is not None:
            params.append((key, value))

    query = urlencode(params)
    return f"?{query}" if query else ""


def _normalize_gateway_v1_headers(event: Mapping[str, Any]) -> Dict[str, str]:
    headers: Dict[str, str] = {}

    for key, values in (event.get("multiValueHeaders") or {}).items():
        if values:
            headers[key.lower()] = ",".join(str(value) for value in values)

    # Single-value headers win over their multi-value counterparts
    for key, value in (event.get("headers") or {}).items():
        if value:
            headers[key.lower()] = str(value)

    return headers


def _normalize_gateway_v2_headers(event: Mapping[str, Any]) -> Dict[str, str]:
    headers: Dict[str, str] = {}

    cookies = event.get("cookies")
    if isinstance(cookies, list):
        headers["cookie"] = "; ".join(cookies)

    for key, value in (event.get("headers") or {}).items():
        if value is not None:
            headers[key.lower()] = str(value)

    return headers


def _normalize_gateway_v2_body(event: Mapping[str, Any]) -> bytes:
    body = event.get("body")

    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return _decode_body(body, bool(event.get("isBase64Encoded")))
    if isinstance(body, (dict, list)):
        return json.dumps(body).encode("utf-8")

    return b""


def _normalize_cloudfront_headers(raw_headers: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    headers: Dict[str, str] = {}

    for key, entries in (raw_headers or {}).items():
        for entry in entries or []:
            value = entry.get("value") if isinstance(entry, Mapping) else None
            if value:
                headers[key.lower()] = value

    return headers


# Outbound


def convert_to_gateway_v1_result(result: Result) -> Dict[str, Any]:
    """Convert a result to an API Gateway v1 proxy response."""
    headers: Dict[str, str] = {}
    multi_value_headers: Dict[str, List[str]] = {}

    for key, value in result.headers.items():
        if isinstance(value, list):
            multi_value_headers[key] = [_header_to_string(item) for item in value]
        else:
            headers[key] = _header_to_string(value)

    return {
        "statusCode": result.status_code,
        "headers": headers,
        "multiValueHeaders": multi_value_headers,
        "body": result.body,
        "isBase64Encoded": result.is_base64_encoded,
    }


def convert_to_gateway_v2_result(result: Result) -> Dict[str, Any]:
    """Convert a result to an API Gateway payload 2.0 response.

    ``set-cookie`` is moved out of the headers into the ``cookies`` list.
    """
    headers: Dict[str, str] = {}
    cookies: HeaderValue = None

    for key, value in result.headers.items():
        if key.lower() == "set-cookie":
            cookies = value
            continue
        if isinstance(value, list):
            headers[key] = ", ".join(_header_to_string(item) for item in value)
        else:
            headers[key] = _header_to_string(value)

    response: Dict[str, Any] = {
        "statusCode": result.status_code,
        "headers": headers,
        "body": result.body,
        "isBase64Encoded": result.is_base64_encoded,
    }
    if cookies is not None:
        response["cookies"] = cookies
    return response


def convert_to_cloudfront_result(result: Result) -> Dict[str, Any]:
    """Convert a result to a CloudFront (Lambda@Edge) response.

    CloudFront rejects an explicit content-length, so it is dropped.
    """
    headers: Dict[str, List[Dict[str, str]]] = {}

    for key, value in result.headers.items():
        if key.lower() == "content-length":
            continue
        values = value if isinstance(value, list) else [value]
        headers.setdefault(key, []).extend(
            {"key": key, "value": _header_to_string(item)} for item in values
        )

    return {
        "status": str(result.status_code),
        "statusDescription": _status_description(result.status_code),
        "headers": headers,
        "bodyEncoding": "base64" if result.is_base64_encoded else "text",
        "body": result.body,
    }


def _header_to_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _status_description(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "OK"


_INBOUND_CONVERTERS: Dict[EventProtocol, Callable[[Mapping[str, Any]], Event]] = {
    EventProtocol.GATEWAY_V1: convert_from_gateway_v1_event,
    EventProtocol.GATEWAY_V2: convert_from_gateway_v2_event,
    EventProtocol.EDGE_FUNCTION: convert_from_cloudfront_event,
}

_OUTBOUND_CONVERTERS: Dict[EventProtocol, Callable[[Result], Dict[str, Any]]] = {
    EventProtocol.GATEWAY_V1: convert_to_gateway_v1_result,
    EventProtocol.GATEWAY_V2: convert_to_gateway_v2_result,
    EventProtocol.EDGE_FUNCTION: convert_to_cloudfront_result,
}
