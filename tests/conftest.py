"""Pytest fixtures: both inventory backends, seeded with the sample lessons."""
import pytest
from fastapi.testclient import TestClient

from main import create_app
from shared.config.settings import Settings
from services.inventory_service.backend import open_connected_inventory
from services.inventory_service.repository import FallbackInventory


def sqlite_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'booking.db'}",
        enable_metrics=False,
        images_dir=str(tmp_path),
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def fallback() -> FallbackInventory:
    return FallbackInventory()


@pytest.fixture
async def connected(tmp_path):
    store = await open_connected_inventory(sqlite_settings(tmp_path))
    yield store
    await store.close()


@pytest.fixture(params=["fallback", "connected"])
async def inventory(request, tmp_path):
    if request.param == "fallback":
        store = FallbackInventory()
    else:
        store = await open_connected_inventory(sqlite_settings(tmp_path))
    yield store
    await store.close()


@pytest.fixture
def client(tmp_path):
    settings = Settings(database_url=None, enable_metrics=False, images_dir=str(tmp_path))
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def connected_client(tmp_path):
    with TestClient(create_app(sqlite_settings(tmp_path))) as client:
        yield client
