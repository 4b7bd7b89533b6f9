"""Directory-backed blob store for development and tests."""

import asyncio
import logging
from pathlib import Path

from raceinfo.storage.base import BlobNotFoundError, BlobStore, BlobStoreError

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """Serve objects from ``<root>/<bucket>/<key>``."""

    def __init__(self, root: Path):
        self.root = Path(root)

    async def fetch(self, bucket: str, key: str) -> bytes:
        path = self.root / bucket / key
        if not path.is_file():
            raise BlobNotFoundError(bucket, key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            logger.error(f"Error reading {path}: {e}")
            raise BlobStoreError(f"Error reading {path}: {e}")
