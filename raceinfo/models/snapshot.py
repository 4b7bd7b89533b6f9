"""Typed records for the daily race snapshot.

The upstream race document is loosely structured JSON. It is decoded once,
here, into frozen dataclasses so that query code never re-checks shape:
malformed entities are skipped, missing optional fields get defaults.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

logger = logging.getLogger(__name__)

FORM_DATE_FORMAT = "%d/%m/%Y"
NON_RUNNER = "NR"


def parse_form_date(value: Optional[str]) -> Optional[date]:
    """Parse a dd/MM/yyyy form date, returning None when unparsable."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), FORM_DATE_FORMAT).date()
    except ValueError:
        return None


def _as_int(value: Any) -> Optional[int]:
    """Coerce a JSON scalar rating to int."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


@dataclass(frozen=True)
class FormEntry:
    """One past run: the date it happened and the rating it earned."""

    date: Optional[str] = None
    rating: Optional[int] = None

    @property
    def parsed_date(self) -> Optional[date]:
        return parse_form_date(self.date)


@dataclass(frozen=True)
class Horse:
    name: str
    # "NR" marks a declared non-runner, None means no odds data
    odds: Optional[str] = None
    past: tuple[FormEntry, ...] = ()

    @property
    def is_non_runner(self) -> bool:
        return self.odds == NON_RUNNER


@dataclass(frozen=True)
class Race:
    time: str
    place: str
    detail: str = ""
    country: Optional[str] = None
    horses: tuple[Horse, ...] = ()


@dataclass(frozen=True)
class Snapshot:
    """The fully merged dataset for one cache generation."""

    races: tuple[Race, ...] = ()
    error: Optional[str] = None
    generation: int = 0
    built_at: datetime = field(default_factory=datetime.now)

    @property
    def available(self) -> bool:
        return self.error is None


# ── Decoding ────────────────────────────────────────────────────────────────


def decode_form_entry(raw: Any) -> Optional[FormEntry]:
    if not isinstance(raw, dict):
        return None
    # The feed stores the rating under "name"; accept "rating" as well.
    rating = raw.get("rating", raw.get("name"))
    return FormEntry(date=_as_text(raw.get("date")), rating=_as_int(rating))


def decode_horse(raw: Any) -> Optional[Horse]:
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    if not isinstance(name, str):
        return None

    past_raw = raw.get("past")
    past: list[FormEntry] = []
    if isinstance(past_raw, list):
        for item in past_raw:
            entry = decode_form_entry(item)
            if entry is not None:
                past.append(entry)

    return Horse(name=name, odds=_as_text(raw.get("odds")), past=tuple(past))


def decode_race(raw: Any) -> Optional[Race]:
    if not isinstance(raw, dict):
        return None
    time = _as_text(raw.get("time"))
    place = _as_text(raw.get("place"))
    if time is None or place is None:
        return None

    horses: list[Horse] = []
    horses_raw = raw.get("horses")
    if isinstance(horses_raw, list):
        for item in horses_raw:
            horse = decode_horse(item)
            if horse is not None:
                horses.append(horse)

    return Race(
        time=time,
        place=place,
        detail=_as_text(raw.get("detail")) or "",
        country=_as_text(raw.get("country")),
        horses=tuple(horses),
    )


def decode_races(document: list) -> list[Race]:
    """Decode a race document, skipping entries that lack time or place."""
    races = []
    skipped = 0
    for item in document:
        race = decode_race(item)
        if race is None:
            skipped += 1
            continue
        races.append(race)
    if skipped:
        logger.warning(f"Skipped {skipped} malformed race entries")
    return races


def decode_odds(document: list) -> dict[str, str]:
    """Build a horse name -> odds map from the odds document.

    A record without an ``odds`` value marks a non-runner. Later records for
    the same name replace earlier ones.
    """
    odds_map: dict[str, str] = {}
    for item in document:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        if not isinstance(name, str):
            continue
        odds = _as_text(item.get("odds")) if "odds" in item else None
        odds_map[name] = odds if odds is not None else NON_RUNNER
    return odds_map
