"""Rating strategies and ranking algorithms.

Tie-break rule used throughout: when two candidates share the extreme
score, the one encountered first (snapshot order, then runner order) wins.
This is intentional and relies on ``max``/``min`` returning the first
extreme element.

Missing data: a horse with no rated form has no derivable score under the
single-race ranking queries and is dropped. Win percentages are the
exception, where such a horse scores 0 and still appears in the breakdown.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from raceinfo.models.snapshot import FormEntry, Horse, Race, Snapshot

# Sentinel returned by the averaging strategies when there is nothing to average
ABSENT = -1.0


class RatingStrategy(str, Enum):
    BEST_EVER = "best_ever"
    LAST_ONE = "last_one"
    LAST_THREE = "last_three"
    ALL_RUNS = "all_runs"
    MOST_RECENT = "most_recent"

    @property
    def label(self) -> str:
        return _STRATEGY_LABELS[self]


_STRATEGY_LABELS = {
    RatingStrategy.BEST_EVER: "best run",
    RatingStrategy.LAST_ONE: "latest run",
    RatingStrategy.LAST_THREE: "last 3 runs",
    RatingStrategy.ALL_RUNS: "all runs",
    RatingStrategy.MOST_RECENT: "most recent run",
}

_AVERAGE_WINDOWS = {
    RatingStrategy.LAST_ONE: 1,
    RatingStrategy.LAST_THREE: 3,
    RatingStrategy.ALL_RUNS: None,
}


class NapFilter(str, Enum):
    """Which races are eligible for the nap of the day."""

    ALL = "all"
    HANDICAP = "handicap"
    UK_HANDICAP = "uk_handicap"

    def matches(self, race: Race) -> bool:
        if self is NapFilter.ALL:
            return True
        is_handicap = "handicap" in race.detail.lower()
        if self is NapFilter.HANDICAP:
            return is_handicap
        return is_handicap and (race.country or "").upper() == "UK"


# ── Per-horse strategies ────────────────────────────────────────────────────


def _rated(entries) -> list[int]:
    return [entry.rating for entry in entries if entry.rating is not None]


def best_ever_rating(horse: Horse) -> Optional[int]:
    """Highest single rating across all form, ignoring dates."""
    ratings = _rated(horse.past)
    return max(ratings) if ratings else None


def average_rating(horse: Horse, window: Optional[int] = None) -> float:
    """Mean rating over the first ``window`` form entries in feed order.

    Entries are taken as they appear in the document, not sorted by date.
    Returns ``ABSENT`` when there is no rated entry to average.
    """
    entries = horse.past if window is None else horse.past[:window]
    ratings = _rated(entries)
    if not ratings:
        return ABSENT
    return sum(ratings) / len(ratings)


def most_recent_form(horse: Horse) -> Optional[FormEntry]:
    """Entry with the latest parsable date; the earlier entry wins equal dates."""
    dated = [entry for entry in horse.past if entry.parsed_date is not None]
    if not dated:
        return None
    return max(dated, key=lambda entry: entry.parsed_date)


def most_recent_rating(horse: Horse) -> Optional[int]:
    form = most_recent_form(horse)
    return form.rating if form is not None else None


def score(horse: Horse, strategy: RatingStrategy) -> Optional[float]:
    """Score a horse under ``strategy``; None when no score is derivable."""
    if strategy is RatingStrategy.BEST_EVER:
        return best_ever_rating(horse)
    if strategy is RatingStrategy.MOST_RECENT:
        return most_recent_rating(horse)
    value = average_rating(horse, _AVERAGE_WINDOWS[strategy])
    return None if value < 0 else value


# ── Race-level rankings ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class RankedHorse:
    name: str
    score: float
    time: str = ""
    place: str = ""


def rank_race(race: Race, strategy: RatingStrategy, lowest: bool = False) -> Optional[RankedHorse]:
    """Best (or worst) scoring horse in a race, dropping unscored horses."""
    candidates = []
    for horse in race.horses:
        value = score(horse, strategy)
        if value is not None:
            candidates.append(RankedHorse(horse.name, value, race.time, race.place))
    if not candidates:
        return None
    pick = min if lowest else max
    return pick(candidates, key=lambda c: c.score)


def best_ever_in_race(race: Race) -> Optional[RankedHorse]:
    """Single highest rating of any run by any horse in the race."""
    return rank_race(race, RatingStrategy.BEST_EVER)


@dataclass(frozen=True)
class WinShare:
    name: str
    score: float
    percentage: float


def win_percentages(race: Race, strategy: RatingStrategy) -> Optional[list[WinShare]]:
    """Share of the race's rating pool held by each horse.

    Every runner counts: a horse with no usable form scores 0 rather than
    being dropped. Averages are pooled as they are, fractions included.
    Returns None when the pool is empty.
    """
    scores: list[tuple[str, float]] = []
    for horse in race.horses:
        value = score(horse, strategy)
        scores.append((horse.name, value if value is not None else 0))

    pool = sum(value for _, value in scores)
    if pool == 0:
        return None

    ordered = sorted(scores, key=lambda item: item[1], reverse=True)
    return [WinShare(name, value, value / pool * 100) for name, value in ordered]


def nap_of_the_day(snapshot: Snapshot, nap_filter: NapFilter = NapFilter.ALL) -> Optional[RankedHorse]:
    """Highest last-3-runs average across every eligible race of the day."""
    best: Optional[RankedHorse] = None
    for race in snapshot.races:
        if not nap_filter.matches(race):
            continue
        for horse in race.horses:
            value = average_rating(horse, 3)
            if value < 0:
                continue
            if best is None or value > best.score:
                best = RankedHorse(horse.name, value, race.time, race.place)
    return best


# ── Form helpers ────────────────────────────────────────────────────────────


def form_dates(horse: Horse) -> list[str]:
    """Distinct run dates, newest first. Unparsable dates are skipped."""
    seen: dict[str, date] = {}
    for entry in horse.past:
        parsed = entry.parsed_date
        if parsed is not None and entry.date not in seen:
            seen[entry.date] = parsed
    return sorted(seen, key=lambda d: seen[d], reverse=True)


def form_details(horse: Horse) -> list[FormEntry]:
    """Dated, rated form entries, newest first."""
    usable = [e for e in horse.past if e.parsed_date is not None and e.rating is not None]
    return sorted(usable, key=lambda e: e.parsed_date, reverse=True)
