"""Shared fixtures for PDF Craft tests."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from pdf_craft.client import PDFCraftClient
from pdf_craft.core.config import Settings

API_BASE = "https://api.test/v1"


class FakeClock:
    """Manual clock whose ``sleep`` advances time instead of waiting."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    """Build a JSON response for MockTransport handlers."""
    return httpx.Response(status_code, content=json.dumps(payload).encode(), headers={"Content-Type": "application/json"})


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and .env files."""
    return Settings(_env_file=None, PDF_CRAFT_API_KEY="test-key", PDF_CRAFT_BASE_URL=API_BASE)  # type: ignore


@pytest.fixture
def fake_clock() -> FakeClock:
    """Fake monotonic clock with instant sleep."""
    return FakeClock()


@pytest.fixture
def pdf_file(tmp_path: Path) -> Path:
    """18-byte fake PDF on disk."""
    path = tmp_path / "document.PDF"
    path.write_bytes(b"%PDF-1.7 abcdefghi")
    return path


@pytest.fixture
def make_client(settings: Settings, fake_clock: FakeClock) -> Callable[[Callable[[httpx.Request], httpx.Response]], PDFCraftClient]:
    """Factory for clients whose HTTP traffic goes to ``handler``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> PDFCraftClient:
        transport = httpx.MockTransport(handler)
        return PDFCraftClient(
            settings=settings,
            http_client=httpx.AsyncClient(transport=transport),
            transfer_client=httpx.AsyncClient(transport=transport),
            clock=fake_clock,
            sleep=fake_clock.sleep,
        )

    return factory
