"""
Fixtures for fetchbridge tests.

Provides a real HTTP server (aiohttp TestServer) with routes for:
- Plain file bodies
- Relative and absolute redirect chains
- Error statuses
- Content-Disposition variants
- Subscription headers
"""

from typing import AsyncGenerator

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from fetchbridge.config import FetchConfig

FILE_BODY = b"fetchbridge test payload \x00\x01\x02"
LARGE_BODY = bytes(range(256)) * 1024  # 256KB


async def _file(request: web.Request) -> web.Response:
    return web.Response(body=FILE_BODY, content_type="application/octet-stream")


async def _large(request: web.Request) -> web.Response:
    return web.Response(body=LARGE_BODY, content_type="application/zip")


async def _redirect_chain(request: web.Request) -> web.Response:
    remaining = int(request.match_info["remaining"])
    if remaining <= 0:
        return web.Response(body=FILE_BODY)
    raise web.HTTPFound(f"/redirect/{remaining - 1}")


async def _absolute_redirect(request: web.Request) -> web.Response:
    raise web.HTTPMovedPermanently(str(request.url.with_path("/files/config.yaml")))


async def _named_file(request: web.Request) -> web.Response:
    return web.Response(body=b"named")


async def _no_location(request: web.Request) -> web.Response:
    return web.Response(status=302)


async def _missing(request: web.Request) -> web.Response:
    return web.Response(status=404, text="not here")


async def _server_error(request: web.Request) -> web.Response:
    return web.Response(status=503, text="busy")


async def _redirect_to_missing(request: web.Request) -> web.Response:
    raise web.HTTPTemporaryRedirect("/missing")


async def _disposition(request: web.Request) -> web.Response:
    return web.Response(
        body=b"profile",
        headers={"Content-Disposition": request.query["cd"]},
    )


async def _redirect_to_disposition(request: web.Request) -> web.Response:
    raise web.HTTPSeeOther(
        "/disposition?cd=attachment%3B%20filename%3D%22profile.yaml%22"
    )


async def _subscription(request: web.Request) -> web.Response:
    return web.Response(
        body=b"proxies: []\n",
        headers={
            "Subscription-Userinfo": "upload=100; download=200; total=1000; expire=1700000000",
            "Profile-Title": "My Profile",
            "Profile-Update-Interval": "12",
        },
    )


def build_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/file.bin", _file)
    app.router.add_get("/large.zip", _large)
    app.router.add_get("/redirect/{remaining}", _redirect_chain)
    app.router.add_get("/absolute", _absolute_redirect)
    app.router.add_get("/files/config.yaml", _named_file)
    app.router.add_get("/no-location", _no_location)
    app.router.add_get("/missing", _missing)
    app.router.add_get("/busy", _server_error)
    app.router.add_get("/to-missing", _redirect_to_missing)
    app.router.add_get("/disposition", _disposition)
    app.router.add_get("/to-disposition", _redirect_to_disposition)
    app.router.add_get("/subscription", _subscription)
    app.router.add_get("/", _file)
    return app


@pytest.fixture
async def http_server() -> AsyncGenerator[TestServer, None]:
    """Start a local HTTP server for the duration of one test."""
    server = TestServer(build_app())
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


@pytest.fixture
def fetch_config() -> FetchConfig:
    """Config with short timeouts for local tests."""
    return FetchConfig(connect_timeout=5, read_timeout=5, progress_interval_ms=0)
