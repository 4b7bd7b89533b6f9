"""Base blob store class with common functionality."""

from abc import ABC, abstractmethod


class BlobStoreError(Exception):
    """Exception raised when reading from blob storage fails."""

    pass


class BlobNotFoundError(BlobStoreError):
    """Raised when the requested object does not exist in the bucket."""

    def __init__(self, bucket: str, key: str):
        self.bucket = bucket
        self.key = key
        super().__init__(f"File '{key}' not found in bucket '{bucket}'")


class BlobStore(ABC):
    """Read-only access to objects held in a bucket."""

    @abstractmethod
    async def fetch(self, bucket: str, key: str) -> bytes:
        """Return the raw bytes stored under bucket/key.

        Raises:
            BlobNotFoundError: The object does not exist.
            BlobStoreError: Any other storage failure.
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        pass
