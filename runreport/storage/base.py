"""Blob store interface."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List

from pydantic import BaseModel

from ..errors import UploadError


def serialize_data(data: Any) -> bytes:
    """Serialize data for storage: raw bytes, text, pydantic JSON or plain JSON."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, BaseModel):
        return data.model_dump_json(indent=2).encode("utf-8")
    return json.dumps(data, indent=2, default=str).encode("utf-8")


class BlobStore(ABC):
    """Abstract base class for blob stores.

    Stores are idempotent: an existing blob is left untouched unless
    `overwrite` is set.
    """

    @abstractmethod
    def store_data(self, data: Any, destination: str, container_url: str, overwrite: bool = False) -> str:
        """
        Store data as a single blob.

        Args:
            data: Data to store (see serialize_data)
            destination: Blob path inside the container
            container_url: Container location
            overwrite: Replace an existing blob

        Returns:
            Location of the stored blob

        Raises:
            UploadError: If the blob cannot be written
        """
        pass

    def store_folder(
        self,
        local_dir: Path,
        destination: str,
        container_url: str,
        overwrite: bool = False,
    ) -> List[str]:
        """Store every file of a local folder under a blob prefix."""
        local_dir = Path(local_dir)
        if not local_dir.is_dir():
            raise UploadError(destination, f"Folder not found: {local_dir}")

        stored = []
        for path in sorted(p for p in local_dir.rglob("*") if p.is_file()):
            relative = path.relative_to(local_dir).as_posix()
            stored.append(
                self.store_data(path.read_bytes(), f"{destination}/{relative}", container_url, overwrite)
            )
        return stored
