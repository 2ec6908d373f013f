"""Application loading for edgebridge.

Resolves the configured ``module:attribute`` reference into a RequestHandler.
The attribute may be a RequestHandler instance, a RequestHandler subclass, or
a plain ASGI application callable.
"""

import importlib
import inspect
import logging
from functools import reduce

from core.asgi_handler import ASGIRequestHandler
from core.interfaces import RequestHandler

logger = logging.getLogger(__name__)


def load_request_handler(reference: str) -> RequestHandler:
    """Import the configured application and wrap it as a RequestHandler.

    Args:
        reference: Application reference, e.g. "myproject.asgi:app"

    Returns:
        RequestHandler serving the application

    Raises:
        ImportError: If the module cannot be imported
        ValueError: If the reference is malformed or names an unusable object
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Invalid application reference: {reference!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ImportError(f"Failed to import application module {module_name}: {e}") from e

    try:
        target = reduce(getattr, attribute.split("."), module)
    except AttributeError as e:
        raise ValueError(f"Module {module_name} has no attribute {attribute!r}") from e

    if inspect.isclass(target) and issubclass(target, RequestHandler):
        target = target()

    if isinstance(target, RequestHandler):
        logger.info(f"Loaded request handler {reference} ({type(target).__name__})")
        return target

    if callable(target):
        logger.info(f"Loaded ASGI application {reference}")
        return ASGIRequestHandler(target)

    raise ValueError(
        f"{reference} is neither a RequestHandler nor an ASGI application "
        f"(got {type(target).__name__})"
    )
