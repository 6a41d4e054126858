"""Blob storage for run outputs."""

from urllib.parse import urlparse

from .azure import AzureBlobStore
from .base import BlobStore, serialize_data
from .local import LocalBlobStore


def get_blob_store(container_url: str) -> BlobStore:
    """Pick a blob store from the container URL scheme."""
    if urlparse(container_url).scheme in ("http", "https"):
        return AzureBlobStore()
    return LocalBlobStore()


__all__ = ["AzureBlobStore", "BlobStore", "LocalBlobStore", "get_blob_store", "serialize_data"]
