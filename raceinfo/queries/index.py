"""Lookup primitives over a snapshot."""

from datetime import datetime, time as dt_time
from typing import Optional

from raceinfo.models.snapshot import Horse, Race, Snapshot

RACE_TIME_FORMAT = "%H:%M"


def parse_race_time(value: str) -> Optional[dt_time]:
    try:
        return datetime.strptime(value, RACE_TIME_FORMAT).time()
    except ValueError:
        return None


def _same_name(a: str, b: str) -> bool:
    return a.lower() == b.lower()


class RaceIndex:
    """Read-only lookups against one snapshot.

    Places and horse names match case-insensitively; race times match as
    exact text with no normalisation ("14:5" is not "14:05").
    """

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    @property
    def races(self) -> tuple[Race, ...]:
        return self.snapshot.races

    def find_race(self, time: str, place: str) -> Optional[Race]:
        for race in self.races:
            if _same_name(race.place, place) and race.time == time:
                return race
        return None

    @staticmethod
    def find_horse_in_race(race: Race, name: str) -> Optional[Horse]:
        for horse in race.horses:
            if _same_name(horse.name, name):
                return horse
        return None

    def find_horse_globally(self, name: str) -> Optional[Horse]:
        """First matching horse in snapshot order."""
        for race in self.races:
            horse = self.find_horse_in_race(race, name)
            if horse is not None:
                return horse
        return None

    def find_horse_races(self, name: str) -> list[tuple[str, str]]:
        """All (time, place) pairs where a horse of this name runs."""
        return [
            (race.time, race.place)
            for race in self.races
            if self.find_horse_in_race(race, name) is not None
        ]

    def list_meetings(self) -> set[str]:
        """Distinct places, keeping the case of the first occurrence."""
        seen: dict[str, str] = {}
        for race in self.races:
            seen.setdefault(race.place.lower(), race.place)
        return set(seen.values())

    def list_times(self, place: str) -> list[str]:
        """Race times at a meeting, sorted as strings.

        This is lexicographic, not chronological: it only orders correctly
        when every time is zero-padded HH:MM, which the feed provides.
        """
        return sorted(race.time for race in self.races if _same_name(race.place, place))

    def next_race(self, now: dt_time) -> Optional[Race]:
        """Earliest race whose time is strictly after ``now``."""
        best: Optional[Race] = None
        best_time: Optional[dt_time] = None
        for race in self.races:
            race_time = parse_race_time(race.time)
            if race_time is None or race_time <= now:
                continue
            if best_time is None or race_time < best_time:
                best, best_time = race, race_time
        return best
