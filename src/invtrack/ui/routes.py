"""HTML image page and uploaded image files."""

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.templating import Jinja2Templates

from invtrack.dependencies import get_blob_store, get_store
from invtrack.inventory.store import InventoryStore
from invtrack.storage.blobs import BlobStore

_template_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(_template_dir))

router = APIRouter()


@router.get("/devices/{device_id}/image", response_class=HTMLResponse)
def device_image_page(
    request: Request,
    device_id: int,
    store: InventoryStore = Depends(get_store),
) -> HTMLResponse:
    image_path = store.get_device_image(device_id)
    device = store.get_device(device_id)
    if image_path is None or device is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return templates.TemplateResponse(
        request,
        "device_image.html",
        {
            "device": device,
            "image_url": request.url_for("serve_image", filename=image_path).path,
        },
    )


@router.get("/images/{filename}", name="serve_image")
def serve_image(
    filename: str,
    blobs: BlobStore = Depends(get_blob_store),
) -> FileResponse:
    path = blobs.resolve(filename)
    if path is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return FileResponse(path)
