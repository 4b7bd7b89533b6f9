"""API endpoints for race queries.

Every query endpoint answers with a plain-text sentence, including when the
race, horse or data is missing.
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from raceinfo.queries.service import RacesInfo, get_races_info

logger = logging.getLogger(__name__)

router = APIRouter(default_response_class=PlainTextResponse)


@router.get("/meetings")
async def get_meetings(info: RacesInfo = Depends(get_races_info)):
    """List today's meeting places."""
    logger.info("REST request received for all the meetings")
    return await info.get_meetings()


@router.get("/all-times")
async def get_all_times(place: str, info: RacesInfo = Depends(get_races_info)):
    logger.info(f"REST request for all times at {place}")
    return await info.get_all_times(place)


@router.get("/all-runners")
async def get_all_runners(time: str, place: str, info: RacesInfo = Depends(get_races_info)):
    logger.info(f"REST request for all runners in the {time} at {place}")
    return await info.get_all_runners(time, place)


@router.get("/get-odds")
async def get_odds(time: str, place: str, info: RacesInfo = Depends(get_races_info)):
    logger.info(f"REST request for odds in the {time} at {place}")
    return await info.get_odds(time, place)


# =============================================================================
# RANKINGS
# =============================================================================

@router.get("/top-rated")
async def get_top_rated(time: str, place: str, info: RacesInfo = Depends(get_races_info)):
    """Best average over the last 3 runs."""
    logger.info(f"REST request for top rated horse in the {time} at {place}")
    return await info.get_top_rated(time, place)


@router.get("/bottom-rated")
async def get_bottom_rated(time: str, place: str, info: RacesInfo = Depends(get_races_info)):
    """Worst average over the last 3 runs."""
    logger.info(f"REST request for bottom rated horse in the {time} at {place}")
    return await info.get_bottom_rated(time, place)


@router.get("/best-ever-rated")
async def get_best_ever_rated(time: str, place: str, info: RacesInfo = Depends(get_races_info)):
    logger.info(f"REST request for best ever rated horse in the {time} at {place}")
    return await info.get_best_ever_rated(time, place)


@router.get("/best-average-rated")
async def get_best_average_rated(time: str, place: str, info: RacesInfo = Depends(get_races_info)):
    logger.info(f"REST request for best average rated horse in the {time} at {place}")
    return await info.get_best_average_rated(time, place)


@router.get("/worst-average-rated")
async def get_worst_average_rated(time: str, place: str, info: RacesInfo = Depends(get_races_info)):
    logger.info(f"REST request for worst average rated horse in the {time} at {place}")
    return await info.get_worst_average_rated(time, place)


@router.get("/best-most-recent-rated")
async def get_best_most_recent_rated(time: str, place: str, info: RacesInfo = Depends(get_races_info)):
    logger.info(f"REST request for best most recent rated horse in the {time} at {place}")
    return await info.get_best_most_recent_rated(time, place)


# =============================================================================
# WIN PERCENTAGES
# =============================================================================

@router.get("/race-win-percentages-from-best-ever")
async def get_race_win_percentages_from_best_ever(
    time: str, place: str, info: RacesInfo = Depends(get_races_info)
):
    logger.info(f"REST request for race win percentages for best ever performance in the {time} at {place}")
    return await info.get_race_win_percentages_from_best_ever(time, place)


@router.get("/race-win-percentages-from-last-one")
async def get_race_win_percentages_from_last_one(
    time: str, place: str, info: RacesInfo = Depends(get_races_info)
):
    logger.info(f"REST request for race win percentages for last run in the {time} at {place}")
    return await info.get_race_win_percentages_from_last_one(time, place)


@router.get("/race-win-percentages-from-last-three")
async def get_race_win_percentages_from_last_three(
    time: str, place: str, info: RacesInfo = Depends(get_races_info)
):
    logger.info(f"REST request for race win percentages for last three runs in the {time} at {place}")
    return await info.get_race_win_percentages_from_last_three(time, place)


@router.get("/race-win-percentages-from-all")
async def get_race_win_percentages_from_all(
    time: str, place: str, info: RacesInfo = Depends(get_races_info)
):
    logger.info(f"REST request for race win percentages for all past runs in the {time} at {place}")
    return await info.get_race_win_percentages_from_all(time, place)


# =============================================================================
# NAPS
# =============================================================================

@router.get("/nap-of-the-day")
async def get_nap_of_the_day(info: RacesInfo = Depends(get_races_info)):
    logger.info("REST request received for Nap of the Day")
    return await info.get_nap_of_the_day()


@router.get("/nap-of-the-day-handicap")
async def get_handicap_nap_of_the_day(info: RacesInfo = Depends(get_races_info)):
    logger.info("REST request received for Nap of the Day handicap races only")
    return await info.get_handicap_nap_of_the_day()


@router.get("/nap-of-the-day-uk-handicap")
async def get_uk_handicap_nap_of_the_day(info: RacesInfo = Depends(get_races_info)):
    logger.info("REST request received for Nap of the Day UK handicap races only")
    return await info.get_uk_handicap_nap_of_the_day()


# =============================================================================
# HORSES
# =============================================================================

@router.get("/find-horse-race")
async def find_horse_race(
    horse_name: str = Query(..., alias="horseName"),
    info: RacesInfo = Depends(get_races_info),
):
    logger.info(f"REST request to find race for horse: {horse_name}")
    return await info.find_horse_race(horse_name)


@router.get("/past-run-dates")
async def get_past_run_dates(
    horse_name: str = Query(..., alias="horseName"),
    info: RacesInfo = Depends(get_races_info),
):
    logger.info(f"REST request for past run dates for horse: {horse_name}")
    return await info.get_past_run_dates(horse_name)


@router.get("/horse-form")
async def get_horse_form(
    time: str,
    place: str,
    horse_name: str = Query(..., alias="horseName"),
    info: RacesInfo = Depends(get_races_info),
):
    logger.info(f"REST request for form for horse {horse_name} in the {time} at {place}")
    return await info.get_horse_form(time, place, horse_name)


@router.get("/next-race")
async def get_next_race(info: RacesInfo = Depends(get_races_info)):
    logger.info("REST request for the next race")
    return await info.get_next_race()


# =============================================================================
# CACHE
# =============================================================================

@router.get("/cache/status", response_class=JSONResponse)
async def cache_status(info: RacesInfo = Depends(get_races_info)):
    """Report the cache generation and when its snapshot was built."""
    cache = info.cache
    snapshot = cache.peek()
    return {
        "generation": cache.generation,
        "cached": snapshot is not None,
        "built_at": cache.last_built_at.isoformat() if cache.last_built_at else None,
        "races": len(snapshot.races) if snapshot is not None else 0,
        "error": snapshot.error if snapshot is not None else None,
    }


@router.post("/cache/refresh", response_class=JSONResponse)
async def refresh_cache(info: RacesInfo = Depends(get_races_info)):
    """Discard the cached snapshot and rebuild it from storage."""
    logger.info("REST request to refresh the race data cache")
    snapshot = await info.cache.refresh()
    return {
        "generation": info.cache.generation,
        "races": len(snapshot.races),
        "error": snapshot.error,
    }
