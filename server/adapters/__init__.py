"""Cloud entry points for edgebridge.

This package contains the functions AWS invokes directly:

- ``aws_lambda.lambda_handler`` for API Gateway v1/v2 and Lambda@Edge
  origin-request events, translated through the RequestOrchestrator
- ``cloudfront_function.handler`` for the viewer-request transform that
  runs at the edge before those events are produced
"""

from .aws_lambda import lambda_handler
from .cloudfront_function import sanitize_request

__all__ = ["lambda_handler", "sanitize_request"]
