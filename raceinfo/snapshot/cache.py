"""Daily snapshot cache: fetch, merge, and hold the race dataset.

The race and odds documents are fetched independently from blob storage.
A failed fetch never aborts the build; it is replaced by a sentinel payload
``{"error": "..."}`` which, not being a JSON array, is treated as "no data"
downstream. The merged snapshot is immutable and shared by every query until
the cache is invalidated (normally once a day by the scheduler).
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Optional

from raceinfo.models.snapshot import Snapshot, decode_odds, decode_races
from raceinfo.snapshot.merge import merge_odds
from raceinfo.storage.base import BlobNotFoundError, BlobStore, BlobStoreError

logger = logging.getLogger(__name__)

DATA_FORMAT_ERROR = "Race data is not in the expected format"


def error_payload(message: str) -> dict[str, str]:
    """Sentinel document substituted for one that could not be fetched."""
    return {"error": message}


def describe_document(document: Any) -> str:
    """Explain why a document is not usable as a JSON array."""
    if isinstance(document, dict) and isinstance(document.get("error"), str):
        return document["error"]
    return DATA_FORMAT_ERROR


def build_snapshot(races_doc: Any, odds_doc: Any, generation: int = 0) -> Snapshot:
    """Decode both documents and merge odds into the races.

    A race document that is not an array yields an unavailable snapshot.
    An odds document that is not an array leaves the races without odds.
    """
    if not isinstance(races_doc, list):
        error = describe_document(races_doc)
        logger.error(f"Race data unavailable: {error}")
        return Snapshot(error=error, generation=generation)

    races = decode_races(races_doc)
    if isinstance(odds_doc, list):
        races = merge_odds(races, decode_odds(odds_doc))
    else:
        logger.warning(f"Odds unavailable, keeping races without odds: {describe_document(odds_doc)}")

    return Snapshot(races=tuple(races), generation=generation)


class SnapshotCache:
    """Single-entry cache holding the current Snapshot.

    Concurrent misses share one in-progress build, so each generation costs
    exactly one pair of fetches and every waiter receives the same object.
    """

    def __init__(
        self,
        store: BlobStore,
        bucket: str,
        races_key: str,
        odds_key: str,
        fill_timeout: Optional[float] = None,
    ):
        self.store = store
        self.bucket = bucket
        self.races_key = races_key
        self.odds_key = odds_key
        self.fill_timeout = fill_timeout
        self._snapshot: Optional[Snapshot] = None
        self._pending: Optional[asyncio.Future] = None
        self._generation = 0
        self.builds = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def last_built_at(self) -> Optional[datetime]:
        snapshot = self._snapshot
        return snapshot.built_at if snapshot is not None else None

    def peek(self) -> Optional[Snapshot]:
        """Return the cached snapshot without triggering a build."""
        return self._snapshot

    async def get_snapshot(self) -> Snapshot:
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._build(self._generation))
        pending = self._pending

        if self.fill_timeout is None:
            return await asyncio.shield(pending)
        try:
            return await asyncio.wait_for(asyncio.shield(pending), self.fill_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Snapshot build still running after {self.fill_timeout}s")
            return Snapshot(
                error=f"Timed out after {self.fill_timeout}s waiting for race data",
                generation=self._generation,
            )

    def invalidate(self) -> None:
        """Discard the current snapshot; the next query starts a new generation."""
        self._generation += 1
        self._snapshot = None
        self._pending = None
        logger.info(f"Snapshot cache invalidated, generation now {self._generation}")

    async def refresh(self) -> Snapshot:
        """Invalidate and immediately rebuild."""
        self.invalidate()
        return await self.get_snapshot()

    async def close(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        await self.store.close()

    async def _build(self, generation: int) -> Snapshot:
        logger.info("Reading all of today's horse racing data to cache.")
        try:
            races_doc, odds_doc = await asyncio.gather(
                self._fetch_document(self.races_key),
                self._fetch_document(self.odds_key),
            )
            snapshot = build_snapshot(races_doc, odds_doc, generation=generation)
        except Exception as e:
            logger.exception(f"Snapshot build failed: {e}")
            snapshot = Snapshot(error=f"Snapshot build failed: {e}", generation=generation)
            # Not stored, the next query retries
            if generation == self._generation:
                self._pending = None
            return snapshot

        self.builds += 1
        if generation == self._generation:
            self._snapshot = snapshot
            self._pending = None
            logger.info(f"Snapshot generation {generation} cached with {len(snapshot.races)} races")
        else:
            logger.info(f"Snapshot generation {generation} superseded, not cached")
        return snapshot

    async def _fetch_document(self, key: str) -> Any:
        try:
            content = await self.store.fetch(self.bucket, key)
        except BlobNotFoundError as e:
            logger.error(str(e))
            return error_payload(f"File not found in bucket '{self.bucket}'")
        except BlobStoreError as e:
            logger.error(f"Error reading from storage: {e}")
            return error_payload(f"Error reading from storage: {e}")

        try:
            return json.loads(content.decode("utf-8"))
        except ValueError as e:
            logger.error(f"Invalid JSON in '{key}': {e}")
            return error_payload(f"Invalid JSON in '{key}'")


# ── Process-wide cache ──────────────────────────────────────────────────────

_cache: Optional[SnapshotCache] = None


def init_snapshot_cache(store: BlobStore, settings) -> SnapshotCache:
    """Create the process-wide cache. Called once from the app lifespan."""
    global _cache
    _cache = SnapshotCache(
        store,
        bucket=settings.bucket,
        races_key=settings.races_key,
        odds_key=settings.odds_key,
        fill_timeout=settings.fill_timeout,
    )
    return _cache


def get_snapshot_cache() -> SnapshotCache:
    if _cache is None:
        raise RuntimeError("Snapshot cache not initialised")
    return _cache


async def close_snapshot_cache() -> None:
    """Tear down the process-wide cache and its blob store."""
    global _cache
    if _cache is not None:
        await _cache.close()
        _cache = None
