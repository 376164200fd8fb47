"""Device and user models and assignment status enum."""

import enum
from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class AssignmentStatus(enum.StrEnum):
    in_storage = "in_storage"
    in_use = "in_use"


class Device(SQLModel):
    id: int
    name: str
    description: str | None = None
    serial_number: str | None = None
    manufacturer: str | None = None
    image_path: str | None = None  # blob filename
    assignment_status: AssignmentStatus = AssignmentStatus.in_storage
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class User(SQLModel):
    """A person who can take devices out of storage."""

    id: int
    name: str
    # Ids of held devices, filled in from the holder map on every read
    assigned_devices: list[int] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
