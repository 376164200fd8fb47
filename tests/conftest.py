"""Shared test fixtures."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

import invtrack.config as config_module
from invtrack.dependencies import get_blob_store, get_store
from invtrack.inventory.store import InventoryStore
from invtrack.main import app
from invtrack.storage.blobs import BlobStore


@pytest.fixture
def store() -> InventoryStore:
    return InventoryStore()


@pytest.fixture
def blob_store(tmp_path) -> BlobStore:
    return BlobStore(tmp_path / "uploads")


@pytest.fixture
def client(store, blob_store, tmp_path, monkeypatch) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test store and blob store."""
    # Keep the lifespan's own blob store out of the working directory
    monkeypatch.setattr(config_module.settings, "upload_dir", tmp_path / "lifespan-uploads")

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
