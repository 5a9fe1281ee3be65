"""Shared fixtures: a SQLite-backed store and a temp photo directory per test."""
import asyncio
from pathlib import Path

import pytest

from core.config import Settings
from core.context import StoreContext
from storage import StagedUpload


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh SQLite file and cache directory."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}",
        database_echo=False,
        cache_dir=str(tmp_path / "cache"),
    )


@pytest.fixture
def cache_dir(settings):
    return Path(settings.cache_dir)


@pytest.fixture
def run_store(settings):
    """
    Run ``scenario(store)`` against a started StoreContext and return its result.

    Each call gets its own event loop, so scenarios must do all their async
    work inside the coroutine.
    """
    def _run(scenario):
        async def _go():
            store = StoreContext.from_settings(settings)
            await store.start()
            try:
                return await scenario(store)
            finally:
                await store.close()

        return asyncio.run(_go())

    return _run


@pytest.fixture
def make_upload(tmp_path):
    """Write bytes to a staging file, the way the HTTP layer does."""
    staging = tmp_path / "staging"
    staging.mkdir()
    counter = {"n": 0}

    def _make(data: bytes, filename: str = "photo.jpg") -> StagedUpload:
        counter["n"] += 1
        path = staging / f"upload-{counter['n']}{Path(filename).suffix}"
        path.write_bytes(data)
        return StagedUpload(path=path, filename=filename, content_type="image/jpeg")

    return _make
