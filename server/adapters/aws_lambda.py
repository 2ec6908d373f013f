"""AWS Lambda adapter for edgebridge.

Entry point for API Gateway (REST and HTTP API) and Lambda@Edge origin
request invocations. Owns the long-lived RequestOrchestrator that is built
on cold start and reused on warm starts.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

from core.logging_utils import configure_json_logging
from core.validators import get_logging_config, load_config
from server.orchestrator import RequestOrchestrator


class LambdaContext(Protocol):
    """Protocol for AWS Lambda context object.

    This defines the expected interface for Lambda context objects,
    which provide runtime information about the Lambda execution environment.
    """

    aws_request_id: str
    function_name: Optional[str]
    memory_limit_in_mb: Optional[int]


logger = logging.getLogger(__name__)

# Module-level orchestrator for Lambda warm starts
_orchestrator: Optional[RequestOrchestrator] = None


def get_orchestrator() -> RequestOrchestrator:
    """Get or create the request orchestrator instance.

    Uses lazy initialization to support Lambda warm starts. The first call
    loads configuration, configures logging and imports the application.

    Returns:
        RequestOrchestrator instance

    Raises:
        ConfigurationError: If the configuration is invalid
        ImportError: If the application cannot be imported
    """
    global _orchestrator

    if _orchestrator is None:
        config = load_config()
        logging_config = get_logging_config(config)
        configure_json_logging(level=logging_config["level"], pretty=logging_config["pretty"])

        _orchestrator = RequestOrchestrator.from_config(config)
        logger.info("Created new RequestOrchestrator instance")

    return _orchestrator


def lambda_handler(event: Dict[str, Any], context: Optional[LambdaContext]) -> Dict[str, Any]:
    """AWS Lambda handler function.

    Translates the event, serves it, and returns the response in the shape
    the invoking service expects. Failures are logged and re-raised so the
    platform reports the invocation as failed.

    Args:
        event: API Gateway v1/v2 or CloudFront request event
        context: Lambda context object

    Returns:
        Wire response, or a rewritten CloudFront request for prerendered pages
    """
    request_id = context.aws_request_id if context else "unknown"

    try:
        orchestrator = get_orchestrator()

        logger.info(
            "Lambda invocation started",
            extra={
                "request_id": request_id,
                "function_name": getattr(context, "function_name", None) if context else None,
                "memory_limit": getattr(context, "memory_limit_in_mb", None) if context else None,
            },
        )

        response = asyncio.run(orchestrator.handle_event(event, request_id=request_id))

        logger.info(
            "Lambda invocation completed",
            extra={
                "request_id": request_id,
                "status_code": response.get("statusCode", response.get("status")),
            },
        )

        return response

    except Exception as e:
        logger.error(
            f"Error in Lambda handler: {e}",
            extra={
                "request_id": request_id,
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        raise
