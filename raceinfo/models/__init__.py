"""Data models for the race snapshot."""

from raceinfo.models.snapshot import FormEntry, Horse, Race, Snapshot

__all__ = ["FormEntry", "Horse", "Race", "Snapshot"]
