"""
Pytest configuration and shared fixtures for StarAPI tests.
"""

import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from starapi.core.config import StarAPIConfig
from starapi.core.logging import StructuredFormatter
from starapi.storage.backend import InMemoryKeyValueStore, JSONFileKeyValueStore
from starapi.storage.endpoints import EndpointStore


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo setup_logging() so later tests see default propagation."""
    yield
    for name in ("starapi", "aiohttp"):
        logger = logging.getLogger(name)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, StructuredFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(logging.WARNING)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def test_config(temp_dir: Path) -> StarAPIConfig:
    """Provide a test configuration."""
    return StarAPIConfig(
        environment="test",
        debug=True,
        store={"path": str(temp_dir / "storage.json")},
        logging={"level": "DEBUG"},
    )


@pytest.fixture
def memory_backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def file_backend(temp_dir: Path) -> JSONFileKeyValueStore:
    return JSONFileKeyValueStore(temp_dir / "storage.json")


@pytest.fixture
def endpoint_store(memory_backend: InMemoryKeyValueStore) -> EndpointStore:
    """Provide an endpoint store over an in-memory backend."""
    return EndpointStore(memory_backend)


class EchoServer:
    """Local HTTP target recording every request it receives."""

    def __init__(self) -> None:
        self.received: List[dict] = []
        self.release = asyncio.Event()
        self.server = TestServer(self._build_app())

    def url(self, path: str) -> str:
        return str(self.server.make_url(path))

    def _build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_route("*", "/echo", self._echo)
        app.router.add_get("/json", self._json)
        app.router.add_get("/text", self._text)
        app.router.add_get("/nan", self._nan)
        app.router.add_get("/empty", self._empty)
        app.router.add_get("/missing", self._missing)
        app.router.add_get("/multi", self._multi)
        app.router.add_get("/redirect", self._redirect)
        app.router.add_get("/slow", self._slow)
        return app

    async def _echo(self, request: web.Request) -> web.Response:
        body = await request.text()
        self.received.append(
            {
                "method": request.method,
                "body": body,
                "content_type": request.headers.get("Content-Type"),
            }
        )
        return web.json_response({"method": request.method, "body": body})

    async def _json(self, request: web.Request) -> web.Response:
        return web.Response(text='{"a":1}', content_type="application/json")

    async def _text(self, request: web.Request) -> web.Response:
        return web.Response(text="not json")

    async def _nan(self, request: web.Request) -> web.Response:
        return web.Response(text="NaN")

    async def _empty(self, request: web.Request) -> web.Response:
        return web.Response(status=204)

    async def _missing(self, request: web.Request) -> web.Response:
        return web.Response(status=404, reason="Not Found", text="missing")

    async def _multi(self, request: web.Request) -> web.Response:
        response = web.Response(text="ok")
        response.headers.add("X-Multi", "a")
        response.headers.add("X-Multi", "b")
        response.headers["X-Upper-Case"] = "Value"
        return response

    async def _redirect(self, request: web.Request) -> web.Response:
        raise web.HTTPFound("/json")

    async def _slow(self, request: web.Request) -> web.Response:
        try:
            await asyncio.wait_for(self.release.wait(), timeout=5)
        except asyncio.TimeoutError:
            pass
        return web.Response(text="late")


@pytest_asyncio.fixture
async def echo_server() -> EchoServer:
    """Provide a running local HTTP server."""
    echo = EchoServer()
    await echo.server.start_server()
    yield echo
    echo.release.set()
    await echo.server.close()
