# local_server.py
"""Run the edgebridge pipeline locally for testing (no Lambda needed).

Every incoming HTTP request is turned into an API Gateway v2 event and sent
through the same RequestOrchestrator that runs in Lambda.
"""

import asyncio
import base64
import logging
from typing import Any, Dict

from aiohttp import web

from core.logging_utils import configure_json_logging
from core.validators import get_logging_config, load_config
from server.orchestrator import RequestOrchestrator

logger = logging.getLogger(__name__)

# Recomputed by aiohttp from the actual body
HOP_BY_HOP_HEADERS = ("content-length", "transfer-encoding", "connection")


async def request_to_event(request: web.Request) -> Dict[str, Any]:
    """Build an API Gateway v2 event from an aiohttp request."""
    body = await request.read()

    cookies = []
    headers: Dict[str, str] = {}
    for key, value in request.headers.items():
        name = key.lower()
        if name == "cookie":
            cookies.extend(part.strip() for part in value.split(";") if part.strip())
            continue
        headers[name] = f"{headers[name]},{value}" if name in headers else value

    event: Dict[str, Any] = {
        "version": "2.0",
        "rawPath": request.rel_url.raw_path,
        "rawQueryString": request.rel_url.raw_query_string,
        "headers": headers,
        "requestContext": {
            "http": {
                "method": request.method,
                "path": request.path,
                "sourceIp": request.remote or "",
            },
        },
        "isBase64Encoded": bool(body),
    }
    if cookies:
        event["cookies"] = cookies
    if body:
        event["body"] = base64.b64encode(body).decode("ascii")
    return event


def result_to_response(result: Dict[str, Any]) -> web.Response:
    """Build an aiohttp response from an API Gateway v2 result."""
    body = result.get("body") or ""
    if result.get("isBase64Encoded"):
        payload = base64.b64decode(body)
    else:
        payload = body.encode("utf-8")

    response = web.Response(status=result["statusCode"], body=payload)
    for key, value in (result.get("headers") or {}).items():
        if key.lower() not in HOP_BY_HOP_HEADERS:
            response.headers[key] = value
    for cookie in result.get("cookies") or []:
        response.headers.add("Set-Cookie", cookie)
    return response


def create_app(orchestrator: RequestOrchestrator) -> web.Application:
    """Create the aiohttp application that forwards everything to the orchestrator."""

    async def handle(request: web.Request) -> web.Response:
        try:
            event = await request_to_event(request)
            result = await orchestrator.handle_event(event, request_id="local")
            return result_to_response(result)
        except Exception as e:
            # Lambda would report a failed invocation; API Gateway turns that into a 502
            logger.error(f"Error processing request: {e}", exc_info=True)
            return web.Response(status=502, text="Bad Gateway")

    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", handle)
    return app


async def start_server(host: str = "localhost", port: int = 8000) -> None:
    """Start local HTTP server."""
    config = load_config()

    # Pretty-print JSON for better local readability
    logging_config = get_logging_config(config)
    configure_json_logging(level=logging_config["level"], pretty=True)

    orchestrator = RequestOrchestrator.from_config(config)

    runner = web.AppRunner(create_app(orchestrator))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    print("\n" + "=" * 50)
    print("🌐 Local edgebridge server running!")
    print("=" * 50)
    print(f"URL: http://{host}:{port}/")
    print(f"Application: {config.app}")
    print(f"Prerendered pages: {len(orchestrator.prerendered)}")
    print("\nPress Ctrl+C to stop")
    print("=" * 50 + "\n")

    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        await orchestrator.handler.shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(start_server())
    except KeyboardInterrupt:
        print("\n👋 Shutting down...")
