"""Snapshot cache and odds merge."""

from raceinfo.snapshot.cache import (
    SnapshotCache,
    build_snapshot,
    close_snapshot_cache,
    get_snapshot_cache,
    init_snapshot_cache,
)
from raceinfo.snapshot.merge import merge_odds

__all__ = [
    "SnapshotCache",
    "build_snapshot",
    "close_snapshot_cache",
    "get_snapshot_cache",
    "init_snapshot_cache",
    "merge_odds",
]
