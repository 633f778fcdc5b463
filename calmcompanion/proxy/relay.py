"""Same-origin relay for proxy mode

The client posts the completion payload to ``/api/groq`` without any
credential; the relay adds ``Authorization: Bearer $GROQ_API_KEY`` and
forwards it upstream, passing status and body back unchanged.
"""
import asyncio
import json
import logging
from typing import Optional

import aiohttp
from aiohttp import web

from .. import config

logger = logging.getLogger(__name__)

RELAY_PATH = "/api/groq"

UPSTREAM_URL_KEY = web.AppKey("upstream_url", str)
API_KEY_KEY = web.AppKey("api_key", str)
SESSION_KEY = web.AppKey("session", aiohttp.ClientSession)


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


async def relay_completion(request: web.Request) -> web.Response:
    app = request.app
    api_key = app[API_KEY_KEY]
    if not api_key:
        logger.error("❌ Relay has no GROQ_API_KEY configured")
        return _error(500, "Relay is missing its API key")

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "Request body must be JSON")

    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }
    try:
        async with app[SESSION_KEY].post(app[UPSTREAM_URL_KEY], json=payload, headers=headers) as upstream:
            body = await upstream.read()
            content_type = upstream.headers.get("Content-Type", "application/json")
            if upstream.status >= 400:
                logger.warning("⚠️ Upstream answered %s", upstream.status)
            return web.Response(body=body, status=upstream.status,
                                headers={"Content-Type": content_type})
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error("❌ Upstream request failed: %s", e)
        return _error(502, f"Upstream request failed: {e}")


async def _session_ctx(app: web.Application):
    timeout = aiohttp.ClientTimeout(total=config.REQUEST_TIMEOUT)
    app[SESSION_KEY] = aiohttp.ClientSession(timeout=timeout)
    yield
    await app[SESSION_KEY].close()


def create_app(api_key: Optional[str] = None, upstream_url: Optional[str] = None) -> web.Application:
    app = web.Application()
    app[API_KEY_KEY] = config.GROQ_API_KEY if api_key is None else api_key
    app[UPSTREAM_URL_KEY] = upstream_url or config.RELAY_UPSTREAM_URL
    app.cleanup_ctx.append(_session_ctx)
    app.router.add_post(RELAY_PATH, relay_completion)
    return app


def run_relay(host: Optional[str] = None, port: Optional[int] = None):
    host = host or config.RELAY_HOST
    port = port or config.RELAY_PORT
    logger.info("✅ Relay listening on http://%s:%s%s", host, port, RELAY_PATH)
    web.run_app(create_app(), host=host, port=port, print=None)
