"""Event classification for inbound Lambda invocations."""

import logging
from typing import Any, Mapping

from core.interfaces import EventProtocol

logger = logging.getLogger(__name__)


class UnsupportedEventKind(ValueError):
    """Raised when an event or result matches none of the known protocols."""

    pass


def is_edge_function_event(event: Mapping[str, Any]) -> bool:
    """Check whether the event is a CloudFront (Lambda@Edge) request event."""
    records = event.get("Records")
    if not isinstance(records, list) or not records:
        return False
    first = records[0]
    return isinstance(first, Mapping) and isinstance(first.get("cf"), Mapping)


def is_gateway_v2_event(event: Mapping[str, Any]) -> bool:
    """Check whether the event is an API Gateway payload format 2.0 event."""
    return event.get("version") == "2.0"


def is_gateway_v1_event(event: Mapping[str, Any]) -> bool:
    """Check whether the event is an API Gateway REST event (no version marker)."""
    return "Records" not in event and "version" not in event


def classify_event(event: Any) -> EventProtocol:
    """Determine which wire protocol produced an inbound event.

    Edge function events carry no version marker, so they are checked first.

    Args:
        event: Raw Lambda event

    Returns:
        The matching EventProtocol

    Raises:
        UnsupportedEventKind: If the event matches no known protocol
    """
    if not isinstance(event, Mapping):
        raise UnsupportedEventKind(
            f"Unsupported event type: expected a mapping, got {type(event).__name__}"
        )

    if is_edge_function_event(event):
        return EventProtocol.EDGE_FUNCTION
    if is_gateway_v2_event(event):
        return EventProtocol.GATEWAY_V2
    if is_gateway_v1_event(event):
        return EventProtocol.GATEWAY_V1

    logger.warning(
        "Unsupported event shape",
        extra={"event_keys": sorted(str(key) for key in event.keys())},
    )
    raise UnsupportedEventKind("Unsupported event type")
