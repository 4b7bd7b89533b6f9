"""Google Cloud Storage reader over the JSON API."""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from raceinfo.storage.base import BlobNotFoundError, BlobStore, BlobStoreError

logger = logging.getLogger(__name__)


class GCSBlobStore(BlobStore):
    """Fetch objects from a GCS bucket via the storage JSON API."""

    def __init__(
        self,
        base_url: str = "https://storage.googleapis.com",
        token: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def object_url(self, bucket: str, key: str) -> str:
        return f"{self.base_url}/storage/v1/b/{quote(bucket, safe='')}/o/{quote(key, safe='')}"

    async def fetch(self, bucket: str, key: str) -> bytes:
        url = self.object_url(bucket, key)
        try:
            logger.info(f"Fetching gs://{bucket}/{key}")
            response = await self.client.get(url, params={"alt": "media"})
            if response.status_code == 404:
                raise BlobNotFoundError(bucket, key)
            response.raise_for_status()
            return response.content
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching gs://{bucket}/{key}: {e}")
            raise BlobStoreError(f"HTTP {e.response.status_code}: gs://{bucket}/{key}")
        except httpx.RequestError as e:
            logger.error(f"Request error fetching gs://{bucket}/{key}: {e}")
            raise BlobStoreError(f"Request failed: gs://{bucket}/{key}")
