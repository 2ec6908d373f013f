"""Viewer-request transform that runs at the edge, ahead of the Lambda.

Form actions post to URLs such as ``/login?/signin``. CloudFront rejects a
raw ``/`` in a query string key, so those keys are percent-encoded here. The
viewer's host is also preserved in ``x-forwarded-host`` because CloudFront
replaces ``host`` with the origin's hostname.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a string the way browsers encode a URI component."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def sanitize_request(request: Dict[str, Any]) -> Dict[str, Any]:
    """Forward the host header and encode query string keys containing '/'.

    The request is modified in place and returned.

    Args:
        request: Request with 'headers' and 'querystring' mappings

    Returns:
        The same request
    """
    headers = request.get("headers")
    if isinstance(headers, dict) and "host" in headers:
        headers["x-forwarded-host"] = headers["host"]

    querystring = request.get("querystring")
    if isinstance(querystring, dict):
        for key in list(querystring):
            if "/" in key:
                querystring[encode_uri_component(key)] = querystring.pop(key)

    return request


def handler(event: Dict[str, Any], context: Optional[Any] = None) -> Dict[str, Any]:
    """Viewer-request entry point.

    Args:
        event: Event carrying the viewer request under 'request'
        context: Unused runtime context

    Returns:
        The sanitized request, which CloudFront forwards to the origin
    """
    return sanitize_request(event.get("request") or {})
