"""Shared pytest fixtures."""

import asyncio
import json
import shutil
from pathlib import Path
from typing import Any

import httpx
import pytest

from hn_mcp.api.client import HackerNewsClient
from hn_mcp.utils.config import reset_settings
from hn_mcp.utils.logging_config import reset_logging

BASE_URL = "https://hn.test/v0"


@pytest.fixture(scope="session", autouse=True)
def backup_env_file():
    """Backup .env file during test session to prevent pollution."""
    env_file = Path(".env")
    backup_file = Path(".env.test_backup")

    if env_file.exists():
        shutil.copy(env_file, backup_file)
        env_file.unlink()

    yield

    if backup_file.exists():
        shutil.move(backup_file, env_file)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings and rebuild log handlers in every test."""
    reset_settings()
    reset_logging()
    yield
    reset_settings()
    reset_logging()


class FakeHackerNewsAPI:
    """In-memory stand-in for the HackerNews API, served through httpx.MockTransport.

    ``routes`` maps a path below the base URL (e.g. ``/item/1.json``) to a JSON
    payload, an ``httpx.Response`` or an exception to raise. Unknown paths
    answer ``null`` like the real API does for missing records.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.calls: list[str] = []
        self.delay = 0.0

    def add_item(self, item_id: int, **fields: Any) -> dict[str, Any]:
        payload = {"id": item_id, **fields}
        self.routes[f"/item/{item_id}.json"] = payload
        return payload

    def calls_to(self, path: str) -> int:
        return self.calls.count(path)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/v0")
        self.calls.append(path)

        if self.delay:
            await asyncio.sleep(self.delay)

        route = self.routes.get(path)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(
            200,
            content=json.dumps(route).encode(),
            headers={"content-type": "application/json"},
        )


@pytest.fixture
def hn_api() -> FakeHackerNewsAPI:
    return FakeHackerNewsAPI()


@pytest.fixture
def client(hn_api: FakeHackerNewsAPI) -> HackerNewsClient:
    return HackerNewsClient(
        f"{BASE_URL}/",
        timeout_ms=1000,
        transport=httpx.MockTransport(hn_api.handler),
    )
