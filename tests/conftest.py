"""Shared test fixtures for raceinfo."""

import asyncio
import json
from typing import Any, Optional

import pytest

from raceinfo.queries.service import RacesInfo
from raceinfo.snapshot.cache import SnapshotCache
from raceinfo.storage.base import BlobNotFoundError, BlobStore

BUCKET = "test-bucket"
RACES_KEY = "races.json"
ODDS_KEY = "odds.json"


def form(*ratings: int, dates: Optional[list[str]] = None) -> list[dict]:
    """Past-form entries in the feed's shape (rating stored under "name")."""
    dates = dates or [f"{10 - i:02d}/01/2026" for i in range(len(ratings))]
    return [{"date": d, "name": r} for r, d in zip(ratings, dates)]


class FakeBlobStore(BlobStore):
    """In-memory blob store that counts fetches and can fail or stall."""

    def __init__(self, objects: dict[str, Any]):
        self.objects = objects
        self.calls: list[tuple[str, str]] = []
        self.release: Optional[asyncio.Event] = None
        self.closed = False

    async def fetch(self, bucket: str, key: str) -> bytes:
        self.calls.append((bucket, key))
        if self.release is not None:
            await self.release.wait()
        value = self.objects.get(key)
        if value is None:
            raise BlobNotFoundError(bucket, key)
        if isinstance(value, Exception):
            raise value
        if isinstance(value, bytes):
            return value
        return json.dumps(value).encode("utf-8")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def sample_races() -> list[dict]:
    """A small day of racing across two meetings."""
    return [
        {
            "time": "14:05",
            "place": "Ascot",
            "detail": "(CLASS 4)",
            "country": "UK",
            "horses": [
                {"name": "GoodHorse", "past": form(100, 100, 100)},
                {"name": "NoFormHorse", "past": []},
                {"name": "BadHorse", "past": form(50, 50, 50)},
            ],
        },
        {
            "time": "15:00",
            "place": "York",
            "detail": "Sky Bet Handicap (CLASS 3)",
            "country": "UK",
            "horses": [
                {"name": "AverageHorse", "past": form(75, 75, 75)},
                {"name": "O'Brien's Pride", "past": form(80, 60)},
            ],
        },
        {
            "time": "13:50",
            "place": "Ascot",
            "detail": "Novice Stakes",
            "country": "UK",
            "horses": [
                {"name": "Early Bird", "past": form(70)},
            ],
        },
    ]


@pytest.fixture
def sample_odds() -> list[dict]:
    return [
        {"name": "GoodHorse", "odds": "2/1", "event": "14:05 Ascot"},
        {"name": "BadHorse", "event": "14:05 Ascot"},
        {"name": "OBriens Pride", "odds": "9/2", "event": "15:00 York"},
    ]


@pytest.fixture
def store(sample_races, sample_odds) -> FakeBlobStore:
    return FakeBlobStore({RACES_KEY: sample_races, ODDS_KEY: sample_odds})


@pytest.fixture
def cache(store) -> SnapshotCache:
    return SnapshotCache(store, bucket=BUCKET, races_key=RACES_KEY, odds_key=ODDS_KEY)


@pytest.fixture
def info(cache) -> RacesInfo:
    return RacesInfo(cache)


@pytest.fixture
def make_cache():
    """Factory for a cache over arbitrary documents.

    Values may be JSON-able objects, raw bytes, an exception to raise, or
    None for a missing object.
    """

    def _make(races: Any, odds: Any = None, fill_timeout: Optional[float] = None) -> SnapshotCache:
        fake = FakeBlobStore({RACES_KEY: races, ODDS_KEY: odds if odds is not None else []})
        return SnapshotCache(
            fake, bucket=BUCKET, races_key=RACES_KEY, odds_key=ODDS_KEY, fill_timeout=fill_timeout
        )

    return _make
