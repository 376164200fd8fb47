"""Disk-backed storage for uploaded device images.

Blobs live flat under a single root directory and are named by a random
token, keeping the client's file extension when it looks sane:

    uploads/3f9c...e1.png
"""

import logging
import re
import secrets
import shutil
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

_SUFFIX_RE = re.compile(r"^\.[a-z0-9]{1,10}$")


class BlobStore:
    def __init__(self, root: Path | str):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def save(self, stream: BinaryIO, filename: str | None = None) -> str:
        """Copy ``stream`` into a new blob and return its generated name.

        Args:
            stream: File-like object, read to the end.
            filename: Original client filename, used only for its extension.
        """
        suffix = Path(filename).suffix.lower() if filename else ""
        if not _SUFFIX_RE.match(suffix):
            suffix = ""
        name = f"{secrets.token_hex(16)}{suffix}"
        path = self.root / name

        try:
            with open(path, "wb") as f:
                shutil.copyfileobj(stream, f)
        except BaseException:
            # Drop the partial file
            path.unlink(missing_ok=True)
            logger.warning("Failed to store blob %s", name)
            raise

        logger.info("Stored blob %s (%d bytes)", name, path.stat().st_size)
        return name

    def resolve(self, name: str) -> Path | None:
        """Return the path of a stored blob, or None if missing or not a plain name."""
        if not name or name.startswith(".") or Path(name).name != name:
            return None
        path = self.root / name
        if not path.is_file():
            return None
        return path

    def delete(self, name: str) -> bool:
        """Remove a blob. Returns True if a file was deleted."""
        path = self.resolve(name)
        if path is None:
            return False
        path.unlink()
        logger.info("Deleted blob %s", name)
        return True
