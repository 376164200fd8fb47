"""Inventory API application entrypoint."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from invtrack.config import settings
from invtrack.inventory.store import InventoryStore
from invtrack.storage.blobs import BlobStore

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup/shutdown lifecycle."""
    app.state.store = InventoryStore()
    app.state.blob_store = BlobStore(settings.upload_dir)
    logger.info("Inventory store ready, images stored in %s", settings.upload_dir)

    yield

    devices, users = app.state.store.counts()
    logger.info("Shutting down with %d device(s) and %d user(s) in memory", devices, users)


app = FastAPI(
    title="Inventory API",
    description="Track devices, the users holding them, and device images",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=settings.docs_url,
)


# Register routers
from invtrack.api.routes import router as api_router  # noqa: E402
from invtrack.ui.routes import router as ui_router  # noqa: E402

app.include_router(api_router)
app.include_router(ui_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


def main() -> None:
    import uvicorn

    logger.info("Server running at http://%s:%d%s", settings.host, settings.port, settings.docs_url)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
