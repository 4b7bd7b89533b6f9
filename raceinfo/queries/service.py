"""Query service shared by the tool and REST surfaces.

Every public method takes plain string identifiers and returns a sentence.
Nothing raises: missing races or horses, an unusable snapshot, and any
unexpected error all come back as descriptive text.
"""

import functools
import logging
from datetime import time as dt_time
from typing import Optional

from raceinfo.config import racing_now
from raceinfo.models.snapshot import Race
from raceinfo.queries import messages
from raceinfo.queries.index import RaceIndex
from raceinfo.queries.ranking import (
    NapFilter,
    RatingStrategy,
    best_ever_in_race,
    form_dates,
    form_details,
    nap_of_the_day,
    rank_race,
    win_percentages,
)
from raceinfo.snapshot.cache import SnapshotCache, get_snapshot_cache

logger = logging.getLogger(__name__)


def _answer(func):
    """Turn any escaped exception into a sentence."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logger.exception(f"{func.__name__} failed: {e}")
            return f"An error occurred while answering {func.__name__}: {e}"

    return wrapper


class RacesInfo:
    """Answers racing questions against the current cached snapshot."""

    def __init__(self, cache: SnapshotCache):
        self.cache = cache

    async def _index(self) -> Optional[RaceIndex]:
        snapshot = await self.cache.get_snapshot()
        if not snapshot.available:
            return None
        return RaceIndex(snapshot)

    async def _race_query(self, time: str, place: str, answer) -> str:
        """Resolve a race and hand it to ``answer``."""
        index = await self._index()
        if index is None:
            return messages.DATA_UNAVAILABLE
        race = index.find_race(time, place)
        if race is None:
            return messages.race_not_found(time, place)
        return answer(race)

    # ── Meetings, times and runners ─────────────────────────────────────────

    @_answer
    async def get_meetings(self) -> str:
        logger.info("Query for all meeting places")
        index = await self._index()
        if index is None:
            return messages.DATA_UNAVAILABLE
        return messages.meetings(index.list_meetings())

    @_answer
    async def get_all_times(self, place: str) -> str:
        logger.info(f"Query for all race times at {place}")
        index = await self._index()
        if index is None:
            return messages.DATA_UNAVAILABLE
        return messages.race_times(place, index.list_times(place))

    @_answer
    async def get_all_runners(self, time: str, place: str) -> str:
        logger.info(f"Query for all runners in the {time} at {place}")
        return await self._race_query(
            time, place, lambda race: messages.runners(time, place, race.horses)
        )

    @_answer
    async def get_odds(self, time: str, place: str) -> str:
        logger.info(f"Query for odds in the {time} at {place}")
        return await self._race_query(
            time, place, lambda race: messages.odds(time, place, race.horses)
        )

    # ── Single-race rankings ────────────────────────────────────────────────

    @_answer
    async def get_best_ever_rated(self, time: str, place: str) -> str:
        logger.info(f"Query for best ever rated horse in the {time} at {place}")
        return await self._race_query(
            time, place, lambda race: messages.best_ever(time, place, best_ever_in_race(race))
        )

    @_answer
    async def get_best_most_recent_rated(self, time: str, place: str) -> str:
        logger.info(f"Query for best most recent rated horse in the {time} at {place}")
        return await self._race_query(
            time,
            place,
            lambda race: messages.most_recent(
                time, place, rank_race(race, RatingStrategy.MOST_RECENT)
            ),
        )

    async def _average_query(
        self,
        time: str,
        place: str,
        strategy: RatingStrategy,
        lowest: bool,
        description: str,
        failure: str,
    ) -> str:
        def answer(race: Race) -> str:
            top = rank_race(race, strategy, lowest=lowest)
            return messages.average(description, failure, time, place, top)

        return await self._race_query(time, place, answer)

    @_answer
    async def get_top_rated(self, time: str, place: str) -> str:
        logger.info(f"Query for top rated (last 3 runs) horse in the {time} at {place}")
        return await self._average_query(
            time, place, RatingStrategy.LAST_THREE, False,
            "Horse with best last 3 run average rating",
            "No horses with a recent average rating found",
        )

    @_answer
    async def get_bottom_rated(self, time: str, place: str) -> str:
        logger.info(f"Query for bottom rated (last 3 runs) horse in the {time} at {place}")
        return await self._average_query(
            time, place, RatingStrategy.LAST_THREE, True,
            "Horse with worst last 3 run average rating",
            "No horses with a recent average rating found",
        )

    @_answer
    async def get_best_average_rated(self, time: str, place: str) -> str:
        logger.info(f"Query for best average rated horse in the {time} at {place}")
        return await self._average_query(
            time, place, RatingStrategy.ALL_RUNS, False,
            "Horse with best average rating",
            "No horses with an average rating found",
        )

    @_answer
    async def get_worst_average_rated(self, time: str, place: str) -> str:
        logger.info(f"Query for worst average rated horse in the {time} at {place}")
        return await self._average_query(
            time, place, RatingStrategy.ALL_RUNS, True,
            "Horse with worst average rating",
            "No horses with an average rating found",
        )

    # ── Win percentages ─────────────────────────────────────────────────────

    @_answer
    async def get_race_win_percentages(
        self, time: str, place: str, strategy: RatingStrategy = RatingStrategy.BEST_EVER
    ) -> str:
        logger.info(f"Query for race win percentages ({strategy.label}) in the {time} at {place}")
        return await self._race_query(
            time,
            place,
            lambda race: messages.win_percentages(
                strategy.label, time, place, win_percentages(race, strategy)
            ),
        )

    async def get_race_win_percentages_from_best_ever(self, time: str, place: str) -> str:
        return await self.get_race_win_percentages(time, place, RatingStrategy.BEST_EVER)

    async def get_race_win_percentages_from_last_one(self, time: str, place: str) -> str:
        return await self.get_race_win_percentages(time, place, RatingStrategy.LAST_ONE)

    async def get_race_win_percentages_from_last_three(self, time: str, place: str) -> str:
        return await self.get_race_win_percentages(time, place, RatingStrategy.LAST_THREE)

    async def get_race_win_percentages_from_all(self, time: str, place: str) -> str:
        return await self.get_race_win_percentages(time, place, RatingStrategy.ALL_RUNS)

    # ── Nap of the day ──────────────────────────────────────────────────────

    @_answer
    async def get_nap(self, nap_filter: NapFilter = NapFilter.ALL) -> str:
        logger.info(f"Query for nap of the day ({nap_filter.value} races)")
        snapshot = await self.cache.get_snapshot()
        if not snapshot.available:
            return messages.DATA_UNAVAILABLE
        return messages.nap(nap_filter, nap_of_the_day(snapshot, nap_filter))

    async def get_nap_of_the_day(self) -> str:
        return await self.get_nap(NapFilter.ALL)

    async def get_handicap_nap_of_the_day(self) -> str:
        return await self.get_nap(NapFilter.HANDICAP)

    async def get_uk_handicap_nap_of_the_day(self) -> str:
        return await self.get_nap(NapFilter.UK_HANDICAP)

    # ── Horses ──────────────────────────────────────────────────────────────

    @_answer
    async def find_horse_race(self, horse_name: str) -> str:
        logger.info(f"Query to find race for horse: {horse_name}")
        index = await self._index()
        if index is None:
            return messages.DATA_UNAVAILABLE
        return messages.horse_races(horse_name, index.find_horse_races(horse_name))

    @_answer
    async def get_past_run_dates(self, horse_name: str) -> str:
        logger.info(f"Query for past run dates for horse: {horse_name}")
        index = await self._index()
        if index is None:
            return messages.DATA_UNAVAILABLE
        horse = index.find_horse_globally(horse_name)
        if horse is None:
            return messages.horse_not_found(horse_name)
        if not horse.past:
            return messages.no_past_data(horse_name)
        return messages.past_run_dates(horse_name, form_dates(horse))

    @_answer
    async def get_horse_form(self, time: str, place: str, horse_name: str) -> str:
        logger.info(f"Query for form for horse {horse_name} in the {time} at {place}")

        def answer(race: Race) -> str:
            horse = RaceIndex.find_horse_in_race(race, horse_name)
            if horse is None:
                return messages.horse_not_in_race(horse_name, time, place)
            if not horse.past:
                return messages.no_past_data(horse_name)
            return messages.horse_form(horse_name, form_details(horse))

        return await self._race_query(time, place, answer)

    @_answer
    async def get_next_race(self, now: Optional[dt_time] = None) -> str:
        logger.info("Query for the next race")
        index = await self._index()
        if index is None:
            return messages.DATA_UNAVAILABLE
        if now is None:
            now = racing_now().time()
        return messages.next_race(index.next_race(now))


def get_races_info() -> RacesInfo:
    """Dependency for getting the query service over the process-wide cache."""
    return RacesInfo(get_snapshot_cache())
