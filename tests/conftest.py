from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from bbb_dl.media import Downloader

MEETING_ID = "0123456789abcdef0123456789abcdef01234567-1600000000000"


class FakeBackend:
    """A tiny BigBlueButton-like file server."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.transient_failures: dict[str, int] = {}
        self.statuses: dict[str, int] = {}
        self.requests: list[str] = []
        self.base_url = ""

    def add(self, path: str, body: bytes | str) -> None:
        self.files[path] = body.encode() if isinstance(body, str) else body

    def add_asset(self, name: str, body: bytes | str) -> None:
        self.add(f"/presentation/{MEETING_ID}/{name}", body)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @property
    def playback_url(self) -> str:
        return f"{self.base_url}/playback/presentation/2.3/{MEETING_ID}"

    async def handle(self, request: web.Request) -> web.Response:
        path = request.path
        self.requests.append(path)
        if path in self.statuses:
            return web.Response(status=self.statuses[path])
        if self.transient_failures.get(path, 0) > 0:
            self.transient_failures[path] -= 1
            return web.Response(status=503)
        if path not in self.files:
            return web.Response(status=404)
        return web.Response(body=self.files[path])


@pytest_asyncio.fixture
async def backend():
    fake = FakeBackend()
    app = web.Application()
    app.router.add_get("/{tail:.*}", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.base_url = f"http://{server.host}:{server.port}"
    yield fake
    await server.close()


@pytest_asyncio.fixture
async def make_downloader():
    created: list[Downloader] = []

    def factory(**kwargs) -> Downloader:
        kwargs.setdefault("retry_delay", 0)
        downloader = Downloader(**kwargs)
        created.append(downloader)
        return downloader

    yield factory
    for downloader in created:
        await downloader.close()


@pytest.fixture
def dest(tmp_path: Path) -> Path:
    directory = tmp_path / "downloads"
    directory.mkdir()
    return directory
