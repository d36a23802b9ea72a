"""Blob Store - opaque uploads that return a retrievable URL."""

import asyncio
import re
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from ..core.errors import StoreError
from ..core.logger import get_logger

logger = get_logger("blobs")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(name: str) -> str:
    """Strip directories and unsafe characters from an uploaded filename."""
    base = Path(name).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "upload"


class BlobStore(ABC):
    """Interface for file uploads used by assignment submissions."""

    @abstractmethod
    async def upload(self, name: str, data: bytes, content_type: str = "") -> str:
        """Store ``data`` and return the URL it can be fetched from."""


class LocalBlobStore(BlobStore):
    """Uploads written to a local directory, exposed as ``file://`` URLs."""

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def _write(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    async def upload(self, name: str, data: bytes, content_type: str = "") -> str:
        target = self.base_dir / f"{uuid.uuid4().hex[:12]}_{safe_filename(name)}"
        try:
            await asyncio.to_thread(self._write, target, data)
        except OSError as e:
            raise StoreError(f"Failed to upload {name}: {e}") from e

        logger.debug("Blob written", path=str(target), size=len(data))
        return target.resolve().as_uri()
