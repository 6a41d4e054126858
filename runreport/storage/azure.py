"""Blob store on Azure Blob Storage."""

from typing import Any, Dict, Optional
from urllib.parse import quote, urlsplit, urlunsplit

import httpx
from rich.console import Console

from ..errors import UploadError
from .base import BlobStore, serialize_data

console = Console()

API_VERSION = "2021-08-06"
# Returned when If-None-Match: * finds an existing blob
EXISTS_STATUS_CODES = frozenset({409, 412})


class AzureBlobStore(BlobStore):
    """Store blobs with the Blob REST API using a SAS container URL."""

    def __init__(self, timeout: float = 60.0, client: Optional[httpx.Client] = None) -> None:
        """
        Initialize Azure blob store.

        Args:
            timeout: HTTP timeout in seconds
            client: HTTP client to reuse (for testing)
        """
        self.timeout = timeout
        self._client = client

    @staticmethod
    def blob_url(container_url: str, destination: str) -> str:
        """Get the URL of a blob, keeping the container's SAS query."""
        parts = urlsplit(container_url)
        path = f"{parts.path.rstrip('/')}/{quote(destination.lstrip('/'))}"
        return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))

    def _put(self, url: str, content: bytes, headers: Dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return self._client.put(url, content=content, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.put(url, content=content, headers=headers)

    def store_data(self, data: Any, destination: str, container_url: str, overwrite: bool = False) -> str:
        url = self.blob_url(container_url, destination)
        location = url.split("?", 1)[0]
        headers = {
            "x-ms-blob-type": "BlockBlob",
            "x-ms-version": API_VERSION,
            "Content-Type": "application/octet-stream",
        }
        if not overwrite:
            headers["If-None-Match"] = "*"

        try:
            response = self._put(url, serialize_data(data), headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UploadError(destination, str(e)) from e

        if response.status_code in EXISTS_STATUS_CODES and not overwrite:
            console.print(f"[yellow]'{destination}' already stored, skipping[/yellow]")
        elif not response.is_success:
            raise UploadError(destination, f"HTTP {response.status_code}: {response.text[:200]}")
        return location
