"""Logging utilities for edgebridge.

Provides centralized JSON logging configuration, the DEBUG diagnostic flag,
and redaction of credentials before events and responses reach the logs.
"""

import json
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

import httpx
from pythonjsonlogger import json as jsonlogger

# Sensitive keys to filter (case-insensitive substring match)
SENSITIVE_KEYS = [
    "api_key",
    "apikey",
    "api-key",
    "authorization",
    "token",
    "password",
    "secret",
    "credential",
    "cookie",
]

# Sensitive header prefixes (case-insensitive)
SENSITIVE_HEADER_PREFIXES = [
    "x-api-key",
    "x-amz-security-token",
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
]

FALSY_FLAG_VALUES = ("", "0", "false", "no", "off")

# Attributes every LogRecord carries; anything else came in through extra=
_RESERVED_RECORD_ATTRS = frozenset(
    [
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName",
        "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "asctime", "taskName",
    ]
)


def is_debug_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check the DEBUG environment flag.

    Any non-empty value other than 0/false/no/off turns diagnostics on.
    """
    environ = os.environ if environ is None else environ
    return environ.get("DEBUG", "").strip().lower() not in FALSY_FLAG_VALUES


def configure_json_logging(level: str = "INFO", pretty: bool = False) -> None:
    """Configure ALL loggers to use JSON format.

    Sets up the root logger with JSON formatting so every child logger
    inherits it. Should be called once per process, before handling events.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        pretty: If True, use pretty-printed JSON (for local development).
                If False, use compact JSON (for CloudWatch).
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler()
    handler.setLevel(log_level)

    if pretty:
        formatter: logging.Formatter = _PrettyJsonFormatter()
    else:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            timestamp=True,
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


class _PrettyJsonFormatter(logging.Formatter):
    """Pretty JSON formatter for local development.

    Formats logs as indented JSON and truncates large bodies and nested
    structures so full Lambda events stay readable in a terminal.
    """

    def __init__(self, max_string_length: int = 500, max_list_items: int = 10):
        super().__init__()
        self.max_string_length = max_string_length
        self.max_list_items = max_list_items

    def _truncate_value(self, value: Any, depth: int = 0) -> Any:
        if depth > 3:
            return "..."

        if isinstance(value, (bytes, bytearray)):
            return f"<{len(value)} bytes>"
        if isinstance(value, str):
            if len(value) > self.max_string_length:
                return value[: self.max_string_length] + f"... (truncated, {len(value)} chars)"
            return value
        if isinstance(value, dict):
            truncated = {}
            for k, v in list(value.items())[:20]:
                truncated[k] = self._truncate_value(v, depth + 1)
            if len(value) > 20:
                truncated["..."] = f"(truncated, {len(value)} keys)"
            return truncated
        if isinstance(value, list):
            items = [self._truncate_value(item, depth + 1) for item in value[: self.max_list_items]]
            if len(value) > self.max_list_items:
                items.append(f"... (truncated, {len(value)} items)")
            return items
        return value

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as pretty JSON."""
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS:
                log_data[key] = self._truncate_value(value)

        if record.exc_info:
            log_data["exc_info"] = self.formatException(record.exc_info)

        try:
            return json.dumps(log_data, indent=2, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return json.dumps({"message": str(record.getMessage())}, indent=2)


def _is_sensitive_key(key: str) -> bool:
    key_lower = key.lower()
    return any(sensitive_key in key_lower for sensitive_key in SENSITIVE_KEYS)


def sanitize_dict(data: Any, sensitive_keys: Optional[List[str]] = None) -> Any:
    """Recursively sanitize dictionary values for sensitive keys.

    Preserves structure but replaces sensitive values with [REDACTED].
    Binary payloads are replaced by their size.

    Args:
        data: Data to sanitize (dict, list, or primitive)
        sensitive_keys: Optional list of additional sensitive keys to check

    Returns:
        Sanitized data with same structure
    """
    if isinstance(data, dict):
        sanitized = {}
        for key, value in data.items():
            key_str = str(key)
            if _is_sensitive_key(key_str) or (
                sensitive_keys and any(sk.lower() in key_str.lower() for sk in sensitive_keys)
            ):
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = sanitize_dict(value, sensitive_keys)
        return sanitized
    if isinstance(data, list):
        return [sanitize_dict(item, sensitive_keys) for item in data]
    if isinstance(data, (bytes, bytearray)):
        return f"<{len(data)} bytes>"
    return data


def sanitize_headers(headers: Mapping[str, Any]) -> Dict[str, Any]:
    """Sanitize HTTP headers by redacting credentials and cookies.

    Args:
        headers: HTTP headers mapping (single or multi-valued)

    Returns:
        Sanitized headers dictionary
    """
    sanitized: Dict[str, Any] = {}
    for key, value in headers.items():
        key_lower = key.lower()
        if any(key_lower.startswith(prefix) for prefix in SENSITIVE_HEADER_PREFIXES) or _is_sensitive_key(key):
            sanitized[key] = "[REDACTED]"
        else:
            sanitized[key] = value
    return sanitized


def format_event_log(request_id: str, event: Any) -> Dict[str, Any]:
    """Format structured log entry for a raw inbound Lambda event."""
    return {
        "request_id": request_id,
        "lambda_event": sanitize_dict(event),
    }


def format_request_log(request_id: str, request: httpx.Request, remote_address: str) -> Dict[str, Any]:
    """Format structured log entry for a request forwarded to the application.

    Args:
        request_id: Request ID (from Lambda context)
        request: Synthesized request
        remote_address: Client IP handed to the application

    Returns:
        Dictionary with structured log data
    """
    return {
        "request_id": request_id,
        "http_method": request.method,
        "request_url": str(request.url),
        "request_headers": sanitize_headers(dict(request.headers)),
        "request_body_bytes": len(request.content),
        "remote_address": remote_address,
    }


def format_response_log(
    request_id: str,
    status_code: int,
    headers: Mapping[str, Any],
    is_base64_encoded: bool,
    body_length: int,
    duration_ms: float,
) -> Dict[str, Any]:
    """Format structured log entry for the application's response.

    Args:
        request_id: Request ID
        status_code: HTTP status code
        headers: Response headers
        is_base64_encoded: Whether the body was base64 encoded
        body_length: Length of the (possibly encoded) body
        duration_ms: Time spent in the application in milliseconds

    Returns:
        Dictionary with structured log data
    """
    return {
        "request_id": request_id,
        "response_status": status_code,
        "response_headers": sanitize_headers(headers),
        "is_base64_encoded": is_base64_encoded,
        "response_body_length": body_length,
        "duration_ms": round(duration_ms, 2),
    }
