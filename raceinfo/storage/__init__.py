"""Blob storage backends for the daily race and odds documents."""

from raceinfo.storage.base import BlobNotFoundError, BlobStore, BlobStoreError
from raceinfo.storage.gcs import GCSBlobStore
from raceinfo.storage.local import LocalBlobStore

__all__ = [
    "BlobNotFoundError",
    "BlobStore",
    "BlobStoreError",
    "GCSBlobStore",
    "LocalBlobStore",
    "create_store",
]


def create_store(settings) -> BlobStore:
    """Build the blob store named by ``settings.blob_backend``."""
    backend = settings.blob_backend.lower().strip()
    if backend == "gcs":
        return GCSBlobStore(
            base_url=settings.gcs_base_url,
            token=settings.gcs_token,
            timeout=settings.fetch_timeout,
        )
    if backend == "local":
        return LocalBlobStore(settings.local_data_dir)

    raise ValueError(f"Unknown blob backend: {backend}")
