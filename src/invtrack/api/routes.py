"""REST API endpoints."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from invtrack.dependencies import get_blob_store, get_store
from invtrack.inventory.models import Device, User
from invtrack.inventory.store import ConflictError, InventoryStore, NotFoundError
from invtrack.storage.blobs import BlobStore

router = APIRouter()


# Request models
class CreateDeviceRequest(BaseModel):
    name: str
    description: str | None = None
    serial_number: str | None = None
    manufacturer: str | None = None


class UpdateDeviceRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    serial_number: str | None = None
    manufacturer: str | None = None


class CreateUserRequest(BaseModel):
    name: str


class DeviceHolderRequest(BaseModel):
    user_id: int


# --- Devices ---


@router.get("/devices")
def list_devices(store: InventoryStore = Depends(get_store)) -> list[Device]:
    return store.list_devices()


@router.get("/devices/{device_id}")
def device_detail(
    device_id: int,
    store: InventoryStore = Depends(get_store),
) -> Device:
    device = store.get_device(device_id)
    if device is None:
        raise HTTPException(status_code=404, detail="Device not found")
    return device


@router.post("/devices")
def create_new_device(
    request: CreateDeviceRequest,
    store: InventoryStore = Depends(get_store),
) -> Device:
    try:
        return store.create_device(
            name=request.name,
            description=request.description,
            serial_number=request.serial_number,
            manufacturer=request.manufacturer,
        )
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/devices/{device_id}")
def update_device(
    device_id: int,
    request: UpdateDeviceRequest,
    store: InventoryStore = Depends(get_store),
) -> Device:
    # Omitted fields keep their value; an explicit null clears an optional field
    updates = request.model_dump(exclude_unset=True)
    try:
        device = store.update_device(device_id, **updates)
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if device is None:
        raise HTTPException(status_code=404, detail="Device not found")
    return device


@router.delete("/devices/{device_id}")
def delete_existing_device(
    device_id: int,
    store: InventoryStore = Depends(get_store),
) -> dict[str, str]:
    if not store.delete_device(device_id):
        raise HTTPException(status_code=404, detail="Device not found")
    return {"message": "Device deleted"}


@router.put("/devices/{device_id}/image")
def upload_device_image(
    device_id: int,
    image: UploadFile = File(...),
    store: InventoryStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
) -> dict[str, str]:
    try:
        if store.get_device(device_id) is None:
            raise HTTPException(status_code=404, detail="Device not found")
        name = blobs.save(image.file, image.filename)
    finally:
        image.file.close()

    try:
        previous = store.set_device_image(device_id, name)
    except NotFoundError as e:
        # Device deleted while the upload was being written
        blobs.delete(name)
        raise HTTPException(status_code=404, detail=str(e))
    if previous:
        blobs.delete(previous)
    return {"message": "Image uploaded", "image_path": name}


# --- Users ---


@router.get("/users")
def list_all_users(store: InventoryStore = Depends(get_store)) -> list[User]:
    return store.list_users()


@router.post("/users")
def create_new_user(
    request: CreateUserRequest,
    store: InventoryStore = Depends(get_store),
) -> User:
    try:
        return store.create_user(request.name)
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/users/{user_id}")
def user_detail(
    user_id: int,
    store: InventoryStore = Depends(get_store),
) -> User:
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/users/{user_id}/devices")
def list_user_devices(
    user_id: int,
    store: InventoryStore = Depends(get_store),
) -> list[Device]:
    devices = store.list_user_devices(user_id)
    if devices is None:
        raise HTTPException(status_code=404, detail="User not found")
    return devices


# --- Take / return ---


@router.post("/devices/{device_id}/take")
def take_device(
    device_id: int,
    request: DeviceHolderRequest,
    store: InventoryStore = Depends(get_store),
) -> dict[str, str]:
    try:
        store.take_device(device_id, request.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Device taken"}


@router.post("/devices/{device_id}/return")
def return_device(
    device_id: int,
    request: DeviceHolderRequest,
    store: InventoryStore = Depends(get_store),
) -> dict[str, str]:
    try:
        store.return_device(device_id, request.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Device returned to storage"}
