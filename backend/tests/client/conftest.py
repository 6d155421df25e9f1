"""Client fixtures: a temp-file local store and an API client bound to the ASGI app."""

import pytest
from httpx import ASGITransport

from stickyboard.client.api import StickyBoardApi
from stickyboard.client.storage import LocalStore


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "local_storage.json")


@pytest.fixture
async def api(app, store):
    async with StickyBoardApi(
        "http://test/api/v1",
        store=store,
        token="header.payload.signature",
        transport=ASGITransport(app=app),
    ) as client:
        yield client
