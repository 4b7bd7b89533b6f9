"""Natural-language answers for every query outcome.

Averages and percentages are shown to 2 decimal places; single ratings
(best ever, most recent) as whole numbers.
"""

from typing import Optional

from raceinfo.models.snapshot import FormEntry, Horse, Race
from raceinfo.queries.ranking import NapFilter, RankedHorse, WinShare

DATA_UNAVAILABLE = "Error: Race data is not available or in the expected format."
NO_MEETINGS = "No meetings found in the data."
NO_MORE_RACES = "There are no more races scheduled for today."


def race_not_found(time: str, place: str) -> str:
    return f"Could not find the race at {place} at {time}"


def horse_not_found(name: str) -> str:
    return f"Could not find a horse named: {name}"


def horse_not_in_race(name: str, time: str, place: str) -> str:
    return f"Could not find horse {name} in the {time} at {place}"


def no_past_data(name: str) -> str:
    return f"No past race data found for horse: {name}"


# ── Meetings and runners ────────────────────────────────────────────────────


def meetings(places: set[str]) -> str:
    if not places:
        return NO_MEETINGS
    return "List of available meetings: " + ", ".join(sorted(places))


def race_times(place: str, times: list[str]) -> str:
    if not times:
        return f"No race times found for meeting at {place}"
    return f"Race times for {place}: " + ", ".join(times)


def runners(time: str, place: str, horses: tuple[Horse, ...]) -> str:
    if not horses:
        return f"No runners found for the race at {place} at {time}"
    return f"Runners for the {time} at {place}: " + ", ".join(h.name for h in horses)


def _odds_text(horse: Horse) -> str:
    return horse.odds if horse.odds is not None else "no odds"


def odds(time: str, place: str, horses: tuple[Horse, ...]) -> str:
    if not horses:
        return f"No runners found for the race at {place} at {time}"
    prices = ", ".join(f"{h.name} {_odds_text(h)}" for h in horses)
    return f"Odds for the {time} at {place}: {prices}"


def horse_races(name: str, races: list[tuple[str, str]]) -> str:
    if not races:
        return f"Could not find any races for horse: {name}"
    return f"{name} is running in: " + ", ".join(f"{t} at {p}" for t, p in races)


def next_race(race: Optional[Race]) -> str:
    if race is None:
        return NO_MORE_RACES
    return f"The next race is at {race.time} at {race.place}."


# ── Rankings ────────────────────────────────────────────────────────────────


def best_ever(time: str, place: str, top: Optional[RankedHorse]) -> str:
    if top is None:
        return f"No rated horses found for the race at {place} at {time}"
    return f"Top Rated for the {time} at {place} is: {top.name} with a rating of {int(top.score)}"


def most_recent(time: str, place: str, top: Optional[RankedHorse]) -> str:
    if top is None:
        return f"No horses with a recent rating found for the race at {place} at {time}"
    return (
        f"Horse with best most recent rating for the {time} at {place} is: "
        f"{top.name} with a rating of {int(top.score)}"
    )


def average(description: str, failure: str, time: str, place: str, top: Optional[RankedHorse]) -> str:
    if top is None:
        return f"{failure} for the race at {place} at {time}"
    return (
        f"{description} for the {time} at {place} is: {top.name} "
        f"with an average rating of {top.score:.2f}"
    )


def win_percentages(label: str, time: str, place: str, shares: Optional[list[WinShare]]) -> str:
    if shares is None:
        return f"No rating data available to calculate win percentages for the race at {place} at {time}"
    breakdown = ", ".join(f"{s.name}: {s.percentage:.2f}%" for s in shares)
    return f"Win percentages ({label}) for the {time} at {place}: {breakdown}"


_NAP_TITLES = {
    NapFilter.ALL: "nap of the day",
    NapFilter.HANDICAP: "handicap nap of the day",
    NapFilter.UK_HANDICAP: "UK handicap nap of the day",
}

_NAP_FAILURES = {
    NapFilter.ALL: "Could not determine a nap of the day from the available data.",
    NapFilter.HANDICAP: "Could not determine a nap of the day from today's handicap races.",
    NapFilter.UK_HANDICAP: "Could not determine a nap of the day from today's UK handicap races.",
}


def nap(nap_filter: NapFilter, best: Optional[RankedHorse]) -> str:
    if best is None:
        return _NAP_FAILURES[nap_filter]
    return (
        f"The {_NAP_TITLES[nap_filter]} is {best.name} in the {best.time} at {best.place}, "
        f"with a recent average rating of {best.score:.2f}."
    )


# ── Form ────────────────────────────────────────────────────────────────────


def past_run_dates(name: str, dates: list[str]) -> str:
    if not dates:
        return f"No dated past runs found for horse: {name}"
    return f"Past race dates for {name}: " + ", ".join(dates)


def horse_form(name: str, entries: list[FormEntry]) -> str:
    if not entries:
        return f"No valid past performance data found for {name}"
    details = "; ".join(f"Date: {e.date}, Rating: {e.rating}" for e in entries)
    return f"Form for {name}: {details}"
