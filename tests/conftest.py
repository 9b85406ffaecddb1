from __future__ import annotations

import json
from typing import Callable, Dict, List

import httpx
import pytest

from backend.gen_client import GenerationClient

BASE_URL = "https://gen.test"


class FakeClock:
    """Simulated time; `sleep` advances it instead of waiting."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


class FakeService:
    """Routes requests of the generation service to canned handlers."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.calls: List[tuple[str, httpx.Request]] = []
        self.times: Dict[str, float] = {}
        self.gen: Callable[[httpx.Request], httpx.Response] = lambda r: httpx.Response(
            200, json={"results": {"id": "abc123"}}
        )
        self.check: Callable[[httpx.Request], httpx.Response] = lambda r: httpx.Response(
            200, json={"results": {"urls": ["https://x/img.png", "https://x/other.png"]}}
        )
        self.image: Callable[[httpx.Request], httpx.Response] = lambda r: httpx.Response(
            200, content=b"\x89PNG\r\n\x1a\nfake-bytes"
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        name = {"/gen": "gen", "/check": "check"}.get(path, "image")
        self.calls.append((name, request))
        self.times[name] = self.clock.now
        return getattr(self, name)(request)

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def body(self, name: str) -> dict:
        for n, request in self.calls:
            if n == name:
                return json.loads(request.content)
        raise KeyError(name)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(clock: FakeClock) -> FakeService:
    return FakeService(clock)


@pytest.fixture
def client(service: FakeService) -> GenerationClient:
    return GenerationClient(base_url=BASE_URL, transport=httpx.MockTransport(service.handler))
