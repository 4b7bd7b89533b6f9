"""raceinfo - daily race meeting, form and odds query service."""

__version__ = "1.0.0"
