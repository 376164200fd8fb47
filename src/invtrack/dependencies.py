"""Per-application service instances for FastAPI Depends()."""

from fastapi import Request

from invtrack.inventory.store import InventoryStore
from invtrack.storage.blobs import BlobStore


def get_store(request: Request) -> InventoryStore:
    """Return the inventory store owned by the running app."""
    return request.app.state.store


def get_blob_store(request: Request) -> BlobStore:
    """Return the image blob store owned by the running app."""
    return request.app.state.blob_store
