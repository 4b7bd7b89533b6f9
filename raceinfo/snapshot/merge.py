"""Merge odds into decoded races by horse name."""

import logging
from dataclasses import replace
from typing import Optional

from raceinfo.models.snapshot import Horse, Race

logger = logging.getLogger(__name__)


def name_candidates(name: str) -> tuple[str, str, str]:
    """Lookup keys tried in order: exact, apostrophes stripped, upper-cased."""
    return (name, name.replace("'", ""), name.upper())


def lookup_odds(odds_map: dict[str, str], name: str) -> Optional[str]:
    for candidate in name_candidates(name):
        if candidate in odds_map:
            return odds_map[candidate]
    return None


def merge_odds(races: list[Race], odds_map: dict[str, str]) -> list[Race]:
    """Return races with each horse's odds taken from ``odds_map``.

    A horse with no matching odds record keeps whatever the race document
    carried, normally ``odds=None``, which is distinct from the "NR"
    non-runner marker.
    """
    matched = 0
    total = 0
    merged: list[Race] = []
    for race in races:
        horses: list[Horse] = []
        for horse in race.horses:
            total += 1
            odds = lookup_odds(odds_map, horse.name)
            if odds is not None:
                matched += 1
                horse = replace(horse, odds=odds)
            horses.append(horse)
        merged.append(replace(race, horses=tuple(horses)))

    logger.info(f"Odds merged for {matched}/{total} runners")
    return merged
