"""Tool definitions for conversational agents, dispatched to RacesInfo."""

import logging
from typing import Optional

from raceinfo.queries.service import RacesInfo

logger = logging.getLogger(__name__)

_ARG_DESCRIPTIONS = {
    "time": "Race time in 24-hour HH:MM format, e.g. '14:05'",
    "place": "Meeting place (racecourse), e.g. 'Ascot'",
    "horseName": "Horse name, e.g. 'Desert Crown'",
}


def _schema(*required: str) -> dict:
    return {
        "type": "object",
        "properties": {
            arg: {"type": "string", "description": _ARG_DESCRIPTIONS[arg]}
            for arg in required
        },
        "required": list(required),
    }


TOOL_DEFINITIONS = [
    {
        "name": "get_meetings",
        "description": "Retrieve all unique meeting place names from today's race data.",
        "input_schema": _schema(),
    },
    {
        "name": "get_all_times",
        "description": "Get all the race times for a given meeting place.",
        "input_schema": _schema("place"),
    },
    {
        "name": "get_all_runners",
        "description": "Get all the runners for a particular race, identified by its time and place.",
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_odds",
        "description": (
            "Get the current odds for every runner in a race. "
            "'NR' marks a non-runner."
        ),
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_best_ever_rated",
        "description": (
            "Get the best rated horse for a particular race, identified by its time and place. "
            "This is the highest single rating from any past race."
        ),
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_top_rated",
        "description": (
            "Get the horse with the best average rating over last 3 runs for a particular race, "
            "identified by its time and place."
        ),
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_bottom_rated",
        "description": (
            "Get the horse with the worst average rating over last 3 runs (the fiddle) "
            "for a particular race, identified by its time and place."
        ),
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_best_average_rated",
        "description": (
            "Get the horse with the best average rating over all past runs "
            "for a particular race, identified by its time and place."
        ),
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_worst_average_rated",
        "description": (
            "Get the horse with the worst average rating over all past runs "
            "for a particular race, identified by its time and place."
        ),
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_best_most_recent_rated",
        "description": (
            "Get the horse with the highest rating from its most recent race, "
            "for a particular race identified by its time and place."
        ),
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_race_win_percentages_from_best_ever",
        "description": "Win percentage for each horse in a race based on their best-ever rating.",
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_race_win_percentages_from_last_one",
        "description": "Win percentage for each horse in a race based on their latest run rating.",
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_race_win_percentages_from_last_three",
        "description": "Win percentage for each horse in a race based on their last 3 runs average rating.",
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_race_win_percentages_from_all",
        "description": "Win percentage for each horse in a race based on their average rating over all runs.",
        "input_schema": _schema("time", "place"),
    },
    {
        "name": "get_nap_of_the_day",
        "description": (
            "Find the best bet of the day across all races, based on the highest "
            "average rating over the last 3 runs."
        ),
        "input_schema": _schema(),
    },
    {
        "name": "get_handicap_nap_of_the_day",
        "description": (
            "Find the best bet of the day from handicap races only, based on the highest "
            "average rating over the last 3 runs."
        ),
        "input_schema": _schema(),
    },
    {
        "name": "get_uk_handicap_nap_of_the_day",
        "description": (
            "Find the best bet of the day from UK handicap races only, based on the highest "
            "average rating over the last 3 runs."
        ),
        "input_schema": _schema(),
    },
    {
        "name": "find_horse_race",
        "description": "Finds the race times and meetings for a given horse name.",
        "input_schema": _schema("horseName"),
    },
    {
        "name": "get_next_race",
        "description": "Reports the next race time and meeting based on the current time.",
        "input_schema": _schema(),
    },
    {
        "name": "get_past_run_dates",
        "description": "Get all the past race dates for a given horse name, newest first.",
        "input_schema": _schema("horseName"),
    },
    {
        "name": "get_horse_form",
        "description": (
            "Get the recent form (past race dates and ratings) for a specific horse "
            "in a particular race."
        ),
        "input_schema": _schema("time", "place", "horseName"),
    },
]

# Map tool names to implementations
TOOL_HANDLERS = {
    "get_meetings": lambda svc, inp: svc.get_meetings(),
    "get_all_times": lambda svc, inp: svc.get_all_times(inp["place"]),
    "get_all_runners": lambda svc, inp: svc.get_all_runners(inp["time"], inp["place"]),
    "get_odds": lambda svc, inp: svc.get_odds(inp["time"], inp["place"]),
    "get_best_ever_rated": lambda svc, inp: svc.get_best_ever_rated(inp["time"], inp["place"]),
    "get_top_rated": lambda svc, inp: svc.get_top_rated(inp["time"], inp["place"]),
    "get_bottom_rated": lambda svc, inp: svc.get_bottom_rated(inp["time"], inp["place"]),
    "get_best_average_rated": lambda svc, inp: svc.get_best_average_rated(inp["time"], inp["place"]),
    "get_worst_average_rated": lambda svc, inp: svc.get_worst_average_rated(inp["time"], inp["place"]),
    "get_best_most_recent_rated": lambda svc, inp: svc.get_best_most_recent_rated(inp["time"], inp["place"]),
    "get_race_win_percentages_from_best_ever": lambda svc, inp: svc.get_race_win_percentages_from_best_ever(inp["time"], inp["place"]),
    "get_race_win_percentages_from_last_one": lambda svc, inp: svc.get_race_win_percentages_from_last_one(inp["time"], inp["place"]),
    "get_race_win_percentages_from_last_three": lambda svc, inp: svc.get_race_win_percentages_from_last_three(inp["time"], inp["place"]),
    "get_race_win_percentages_from_all": lambda svc, inp: svc.get_race_win_percentages_from_all(inp["time"], inp["place"]),
    "get_nap_of_the_day": lambda svc, inp: svc.get_nap_of_the_day(),
    "get_handicap_nap_of_the_day": lambda svc, inp: svc.get_handicap_nap_of_the_day(),
    "get_uk_handicap_nap_of_the_day": lambda svc, inp: svc.get_uk_handicap_nap_of_the_day(),
    "find_horse_race": lambda svc, inp: svc.find_horse_race(inp["horseName"]),
    "get_next_race": lambda svc, inp: svc.get_next_race(),
    "get_past_run_dates": lambda svc, inp: svc.get_past_run_dates(inp["horseName"]),
    "get_horse_form": lambda svc, inp: svc.get_horse_form(inp["time"], inp["place"], inp["horseName"]),
}

_REQUIRED_ARGS = {d["name"]: d["input_schema"]["required"] for d in TOOL_DEFINITIONS}


async def run_tool(service: RacesInfo, name: str, tool_input: Optional[dict]) -> str:
    """Dispatch a tool call to the query service; always returns text."""
    handler = TOOL_HANDLERS.get(name)
    if not handler:
        return f"Unknown tool: {name}"

    tool_input = tool_input or {}
    for arg in _REQUIRED_ARGS[name]:
        value = tool_input.get(arg)
        if not isinstance(value, str) or not value.strip():
            return f"Missing required argument: {arg}"

    logger.info(f"Tool call {name} with {tool_input}")
    try:
        return await handler(service, tool_input)
    except Exception as e:
        logger.error(f"Tool {name} error: {e}")
        return f"Tool error: {e}"
