"""Blob store on the local filesystem."""

from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

from rich.console import Console

from ..errors import UploadError
from .base import BlobStore, serialize_data

console = Console()


def container_path(container_url: str) -> Path:
    """Resolve a directory path or file:// URL."""
    parsed = urlparse(container_url)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(container_url).expanduser()


class LocalBlobStore(BlobStore):
    """Store blobs as files under a container directory."""

    def store_data(self, data: Any, destination: str, container_url: str, overwrite: bool = False) -> str:
        path = container_path(container_url) / destination
        if path.exists() and not overwrite:
            console.print(f"[yellow]'{destination}' already stored, skipping[/yellow]")
            return str(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(serialize_data(data))
        except OSError as e:
            raise UploadError(destination, str(e)) from e
        return str(path)
