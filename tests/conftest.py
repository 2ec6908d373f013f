"""Shared fixtures: representative API Gateway and CloudFront events."""

import copy
from typing import Any, Dict

import pytest


GATEWAY_V1_EVENT: Dict[str, Any] = {
    "resource": "/{proxy+}",
    "path": "/hello",
    "httpMethod": "GET",
    "headers": {
        "Host": "abc123.execute-api.us-east-1.amazonaws.com",
        "User-Agent": "curl/8.4.0",
    },
    "multiValueHeaders": {
        "Host": ["abc123.execute-api.us-east-1.amazonaws.com"],
        "User-Agent": ["curl/8.4.0"],
    },
    "queryStringParameters": None,
    "multiValueQueryStringParameters": None,
    "pathParameters": {"proxy": "hello"},
    "requestContext": {
        "stage": "prod",
        "identity": {"sourceIp": "203.0.113.7"},
    },
    "body": None,
    "isBase64Encoded": False,
}

GATEWAY_V2_EVENT: Dict[str, Any] = {
    "version": "2.0",
    "routeKey": "$default",
    "rawPath": "/hello",
    "rawQueryString": "",
    "headers": {
        "host": "abc123.execute-api.us-east-1.amazonaws.com",
        "user-agent": "curl/8.4.0",
    },
    "requestContext": {
        "http": {
            "method": "GET",
            "path": "/hello",
            "protocol": "HTTP/1.1",
            "sourceIp": "198.51.100.1",
        },
        "stage": "$default",
    },
    "isBase64Encoded": False,
}

CLOUDFRONT_EVENT: Dict[str, Any] = {
    "Records": [
        {
            "cf": {
                "config": {
                    "distributionId": "EDFDVBD6EXAMPLE",
                    "eventType": "origin-request",
                },
                "request": {
                    "clientIp": "192.0.2.44",
                    "method": "GET",
                    "uri": "/hello",
                    "querystring": "",
                    "headers": {
                        "host": [{"key": "Host", "value": "d111111abcdef8.cloudfront.net"}],
                        "user-agent": [{"key": "User-Agent", "value": "curl/8.4.0"}],
                    },
                }
            }
        }
    ]
}


@pytest.fixture
def v1_event():
    """Factory for API Gateway v1 events with top-level overrides."""

    def make(**overrides: Any) -> Dict[str, Any]:
        event = copy.deepcopy(GATEWAY_V1_EVENT)
        event.update(overrides)
        return event

    return make


@pytest.fixture
def v2_event():
    """Factory for API Gateway v2 events; method/source_ip go into requestContext."""

    def make(method: str = "GET", source_ip: str = "198.51.100.1", **overrides: Any) -> Dict[str, Any]:
        event = copy.deepcopy(GATEWAY_V2_EVENT)
        event["requestContext"]["http"]["method"] = method
        event["requestContext"]["http"]["sourceIp"] = source_ip
        event.update(overrides)
        return event

    return make


@pytest.fixture
def cf_event():
    """Factory for CloudFront events; overrides apply to the request record."""

    def make(**overrides: Any) -> Dict[str, Any]:
        event = copy.deepcopy(CLOUDFRONT_EVENT)
        event["Records"][0]["cf"]["request"].update(overrides)
        return event

    return make
