"""In-memory inventory: device and user CRUD plus take/return assignment."""

import logging
import threading
from typing import Any

from invtrack.inventory.models import AssignmentStatus, Device, User

logger = logging.getLogger(__name__)

# Fields update_device is allowed to touch
_UPDATABLE_DEVICE_FIELDS = frozenset({"name", "description", "serial_number", "manufacturer"})


class InventoryError(Exception):
    """Base class for inventory operation failures."""


class NotFoundError(InventoryError, LookupError):
    """A referenced device or user does not exist, or the assignment is absent."""


class ConflictError(InventoryError, ValueError):
    """A name is already taken, or the device is held by someone else."""


class InventoryStore:
    """Owns the device and user collections and the device -> holder relation.

    Every public method runs under a single re-entrant lock, so compound
    checks (name uniqueness, one holder per device) never interleave when
    requests are served from a thread pool. Records handed back to callers
    are copies; mutating them has no effect on the store.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._devices: dict[int, Device] = {}
        self._users: dict[int, User] = {}
        # device_id -> user_id, in take order
        self._holders: dict[int, int] = {}
        self._next_device_id = 1
        self._next_user_id = 1

    # --- Devices ---

    def list_devices(self) -> list[Device]:
        """Return all devices in insertion order."""
        with self._lock:
            return [d.model_copy() for d in self._devices.values()]

    def get_device(self, device_id: int) -> Device | None:
        with self._lock:
            device = self._devices.get(device_id)
            return device.model_copy() if device is not None else None

    def create_device(
        self,
        name: str,
        description: str | None = None,
        serial_number: str | None = None,
        manufacturer: str | None = None,
    ) -> Device:
        """Register a new device in storage.

        Raises:
            ConflictError: If another device already uses ``name``.
        """
        with self._lock:
            if self._find_device_by_name(name) is not None:
                raise ConflictError(f"Device with name {name!r} already exists")

            device = Device(
                id=self._next_device_id,
                name=name,
                description=description,
                serial_number=serial_number,
                manufacturer=manufacturer,
            )
            self._next_device_id += 1
            self._devices[device.id] = device
            logger.info("Created device: %s (id=%s)", name, device.id)
            return device.model_copy()

    def update_device(self, device_id: int, **fields: Any) -> Device | None:
        """Merge ``fields`` into a device. Return None if not found.

        Unknown keys (including ``id``) are ignored. Renaming onto a name
        used by another device raises ConflictError and changes nothing.
        """
        updates = {k: v for k, v in fields.items() if k in _UPDATABLE_DEVICE_FIELDS}
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return None

            new_name = updates.get("name")
            if new_name is not None and new_name != device.name:
                clash = self._find_device_by_name(new_name)
                if clash is not None:
                    raise ConflictError(f"Device with name {new_name!r} already exists")
            if "name" in updates and new_name is None:
                del updates["name"]

            for key, value in updates.items():
                setattr(device, key, value)
            logger.info("Updated device %s: %s", device_id, sorted(updates))
            return device.model_copy()

    def delete_device(self, device_id: int) -> bool:
        """Delete a device and detach it from its holder.

        Returns True if the device was deleted, False if not found.
        """
        with self._lock:
            device = self._devices.pop(device_id, None)
            if device is None:
                return False

            holder_id = self._holders.pop(device_id, None)
            if holder_id is not None:
                logger.info("Released device %s from user %s on delete", device_id, holder_id)
            logger.info("Deleted device: %s (id=%s)", device.name, device_id)
            return True

    def set_device_image(self, device_id: int, image_path: str) -> str | None:
        """Point a device at a stored image blob.

        Returns the image name it replaced (None if the device had no image),
        read and swapped in one step so the caller can delete exactly that blob.

        Raises:
            NotFoundError: If the device doesn't exist.
        """
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                raise NotFoundError("Device not found")
            previous = device.image_path
            device.image_path = image_path
            logger.info("Set image for device %s: %s (was %s)", device_id, image_path, previous)
            return previous

    def get_device_image(self, device_id: int) -> str | None:
        """Return the image blob name, or None if the device or image is missing."""
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return None
            return device.image_path

    # --- Users ---

    def list_users(self) -> list[User]:
        with self._lock:
            return [self._user_view(u) for u in self._users.values()]

    def get_user(self, user_id: int) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
            return self._user_view(user) if user is not None else None

    def create_user(self, name: str) -> User:
        """Register a new user.

        Raises:
            ConflictError: If another user already uses ``name``.
        """
        with self._lock:
            if any(u.name == name for u in self._users.values()):
                raise ConflictError(f"User with name {name!r} already exists")

            user = User(id=self._next_user_id, name=name)
            self._next_user_id += 1
            self._users[user.id] = user
            logger.info("Created user: %s (id=%s)", name, user.id)
            return self._user_view(user)

    def list_user_devices(self, user_id: int) -> list[Device] | None:
        """Devices currently held by a user, in take order. None if the user is unknown."""
        with self._lock:
            if user_id not in self._users:
                return None
            return [
                self._devices[device_id].model_copy()
                for device_id, holder_id in self._holders.items()
                if holder_id == user_id
            ]

    def get_device_holder(self, device_id: int) -> User | None:
        """Reverse lookup: which user holds this device?"""
        with self._lock:
            holder_id = self._holders.get(device_id)
            if holder_id is None:
                return None
            return self._user_view(self._users[holder_id])

    # --- Assignment ---

    def take_device(self, device_id: int, user_id: int) -> Device:
        """Hand a device to a user.

        Taking a device the user already holds is a no-op.

        Raises:
            NotFoundError: If the device or user doesn't exist.
            ConflictError: If the device is held by a different user.
        """
        with self._lock:
            device, user = self._require_pair(device_id, user_id)

            holder_id = self._holders.get(device_id)
            if holder_id == user_id:
                logger.debug("Device %s already held by user %s", device_id, user_id)
                return device.model_copy()
            if holder_id is not None:
                holder = self._users[holder_id]
                logger.warning(
                    "Rejected take of device %s by user %s: held by user %s",
                    device_id,
                    user_id,
                    holder_id,
                )
                raise ConflictError(f"Device {device.name!r} is already taken by {holder.name}")

            self._holders[device_id] = user_id
            device.assignment_status = AssignmentStatus.in_use
            logger.info("User %s (%s) took device %s", user_id, user.name, device_id)
            return device.model_copy()

    def return_device(self, device_id: int, user_id: int) -> Device:
        """Put a device back in storage.

        Raises:
            NotFoundError: If the device or user doesn't exist, or the
                device is not currently held by this user.
        """
        with self._lock:
            device, user = self._require_pair(device_id, user_id)

            if self._holders.get(device_id) != user_id:
                logger.warning(
                    "Rejected return of device %s by user %s: not held by them",
                    device_id,
                    user_id,
                )
                raise NotFoundError(f"Device {device.name!r} is not held by {user.name}")

            del self._holders[device_id]
            device.assignment_status = AssignmentStatus.in_storage
            logger.info("User %s (%s) returned device %s", user_id, user.name, device_id)
            return device.model_copy()

    def counts(self) -> tuple[int, int]:
        """Return (device count, user count)."""
        with self._lock:
            return len(self._devices), len(self._users)

    # --- Internals (caller holds the lock) ---

    def _find_device_by_name(self, name: str) -> Device | None:
        return next((d for d in self._devices.values() if d.name == name), None)

    def _require_pair(self, device_id: int, user_id: int) -> tuple[Device, User]:
        device = self._devices.get(device_id)
        user = self._users.get(user_id)
        if device is None or user is None:
            raise NotFoundError("Device or user not found")
        return device, user

    def _user_view(self, user: User) -> User:
        held = [d for d, u in self._holders.items() if u == user.id]
        return user.model_copy(update={"assigned_devices": held})
