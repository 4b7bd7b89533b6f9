"""Tests for the RacesInfo query service answers."""

from datetime import time
from unittest.mock import AsyncMock, patch

import pytest

from raceinfo.queries import messages
from raceinfo.queries.ranking import RatingStrategy
from raceinfo.queries.service import RacesInfo


# ── Meetings, times, runners and odds ──────────────────────────────────────


class TestListings:

    @pytest.mark.asyncio
    async def test_meetings(self, info):
        assert await info.get_meetings() == "List of available meetings: Ascot, York"

    @pytest.mark.asyncio
    async def test_no_meetings(self, make_cache):
        info = RacesInfo(make_cache([]))
        assert await info.get_meetings() == "No meetings found in the data."

    @pytest.mark.asyncio
    async def test_all_times(self, info):
        assert await info.get_all_times("ascot") == "Race times for ascot: 13:50, 14:05"

    @pytest.mark.asyncio
    async def test_all_times_unknown_place(self, info):
        assert await info.get_all_times("Chester") == "No race times found for meeting at Chester"

    @pytest.mark.asyncio
    async def test_all_runners(self, info):
        assert await info.get_all_runners("14:05", "Ascot") == (
            "Runners for the 14:05 at Ascot: GoodHorse, NoFormHorse, BadHorse"
        )

    @pytest.mark.asyncio
    async def test_unpadded_time_not_found(self, info):
        assert await info.get_all_runners("14:5", "Ascot") == "Could not find the race at Ascot at 14:5"

    @pytest.mark.asyncio
    async def test_odds(self, info):
        assert await info.get_odds("14:05", "Ascot") == (
            "Odds for the 14:05 at Ascot: GoodHorse 2/1, NoFormHorse no odds, BadHorse NR"
        )

    @pytest.mark.asyncio
    async def test_odds_matched_without_apostrophes(self, info):
        answer = await info.get_odds("15:00", "York")
        assert "O'Brien's Pride 9/2" in answer


# ── Rankings ───────────────────────────────────────────────────────────────


class TestRankings:

    @pytest.mark.asyncio
    async def test_best_ever(self, info):
        assert await info.get_best_ever_rated("14:05", "Ascot") == (
            "Top Rated for the 14:05 at Ascot is: GoodHorse with a rating of 100"
        )

    @pytest.mark.asyncio
    async def test_top_rated(self, info):
        assert await info.get_top_rated("14:05", "Ascot") == (
            "Horse with best last 3 run average rating for the 14:05 at Ascot is: "
            "GoodHorse with an average rating of 100.00"
        )

    @pytest.mark.asyncio
    async def test_bottom_rated_skips_horse_without_form(self, info):
        assert await info.get_bottom_rated("14:05", "Ascot") == (
            "Horse with worst last 3 run average rating for the 14:05 at Ascot is: "
            "BadHorse with an average rating of 50.00"
        )

    @pytest.mark.asyncio
    async def test_best_and_worst_average(self, info):
        best = await info.get_best_average_rated("15:00", "York")
        worst = await info.get_worst_average_rated("15:00", "York")
        assert best == (
            "Horse with best average rating for the 15:00 at York is: "
            "AverageHorse with an average rating of 75.00"
        )
        assert worst == (
            "Horse with worst average rating for the 15:00 at York is: "
            "O'Brien's Pride with an average rating of 70.00"
        )

    @pytest.mark.asyncio
    async def test_most_recent(self, info):
        assert await info.get_best_most_recent_rated("14:05", "Ascot") == (
            "Horse with best most recent rating for the 14:05 at Ascot is: "
            "GoodHorse with a rating of 100"
        )

    @pytest.mark.asyncio
    async def test_no_rated_horses(self, make_cache):
        info = RacesInfo(make_cache([{"time": "14:05", "place": "Ascot", "horses": [{"name": "A"}]}]))
        assert await info.get_top_rated("14:05", "Ascot") == (
            "No horses with a recent average rating found for the race at Ascot at 14:05"
        )
        assert await info.get_best_ever_rated("14:05", "Ascot") == (
            "No rated horses found for the race at Ascot at 14:05"
        )

    @pytest.mark.asyncio
    async def test_win_percentages(self, info):
        assert await info.get_race_win_percentages_from_best_ever("14:05", "Ascot") == (
            "Win percentages (best run) for the 14:05 at Ascot: "
            "GoodHorse: 66.67%, BadHorse: 33.33%, NoFormHorse: 0.00%"
        )

    @pytest.mark.asyncio
    async def test_win_percentage_labels(self, info):
        answers = [
            await info.get_race_win_percentages_from_last_one("15:00", "York"),
            await info.get_race_win_percentages_from_last_three("15:00", "York"),
            await info.get_race_win_percentages_from_all("15:00", "York"),
        ]
        assert answers[0].startswith("Win percentages (latest run) for the 15:00 at York")
        assert answers[1].startswith("Win percentages (last 3 runs) for the 15:00 at York")
        assert answers[2].startswith("Win percentages (all runs) for the 15:00 at York")

    @pytest.mark.asyncio
    async def test_win_percentages_default_strategy(self, info):
        assert await info.get_race_win_percentages("14:05", "Ascot") == (
            await info.get_race_win_percentages("14:05", "Ascot", RatingStrategy.BEST_EVER)
        )

    @pytest.mark.asyncio
    async def test_win_percentages_fractional_averages(self, make_cache):
        race = {
            "time": "14:05",
            "place": "Ascot",
            "horses": [
                {"name": "A", "past": [{"date": "01/01/2026", "name": 1}, {"date": "02/01/2026", "name": 2}]},
                {"name": "B", "past": [{"date": "01/01/2026", "name": 1}]},
            ],
        }
        info = RacesInfo(make_cache([race]))
        assert await info.get_race_win_percentages_from_all("14:05", "Ascot") == (
            "Win percentages (all runs) for the 14:05 at Ascot: A: 60.00%, B: 40.00%"
        )

    @pytest.mark.asyncio
    async def test_win_percentages_empty_pool(self, make_cache):
        info = RacesInfo(make_cache([{"time": "14:05", "place": "Ascot", "horses": [{"name": "A"}]}]))
        assert await info.get_race_win_percentages_from_all("14:05", "Ascot") == (
            "No rating data available to calculate win percentages for the race at Ascot at 14:05"
        )


# ── Naps ───────────────────────────────────────────────────────────────────


class TestNaps:

    @pytest.mark.asyncio
    async def test_nap_of_the_day(self, info):
        assert await info.get_nap_of_the_day() == (
            "The nap of the day is GoodHorse in the 14:05 at Ascot, "
            "with a recent average rating of 100.00."
        )

    @pytest.mark.asyncio
    async def test_handicap_naps(self, info):
        expected = "in the 15:00 at York, with a recent average rating of 75.00."
        assert await info.get_handicap_nap_of_the_day() == (
            f"The handicap nap of the day is AverageHorse {expected}"
        )
        assert await info.get_uk_handicap_nap_of_the_day() == (
            f"The UK handicap nap of the day is AverageHorse {expected}"
        )

    @pytest.mark.asyncio
    async def test_no_nap(self, make_cache):
        info = RacesInfo(make_cache([]))
        assert await info.get_nap_of_the_day() == (
            "Could not determine a nap of the day from the available data."
        )
        assert await info.get_uk_handicap_nap_of_the_day() == (
            "Could not determine a nap of the day from today's UK handicap races."
        )


# ── Horses ─────────────────────────────────────────────────────────────────


class TestHorses:

    @pytest.mark.asyncio
    async def test_find_horse_race(self, info):
        assert await info.find_horse_race("goodhorse") == "goodhorse is running in: 14:05 at Ascot"

    @pytest.mark.asyncio
    async def test_find_unknown_horse(self, info):
        assert await info.find_horse_race("Nobody") == "Could not find any races for horse: Nobody"

    @pytest.mark.asyncio
    async def test_past_run_dates(self, info):
        assert await info.get_past_run_dates("Early Bird") == "Past race dates for Early Bird: 10/01/2026"

    @pytest.mark.asyncio
    async def test_past_run_dates_no_form(self, info):
        assert await info.get_past_run_dates("NoFormHorse") == (
            "No past race data found for horse: NoFormHorse"
        )

    @pytest.mark.asyncio
    async def test_past_run_dates_unknown(self, info):
        assert await info.get_past_run_dates("Nobody") == "Could not find a horse named: Nobody"

    @pytest.mark.asyncio
    async def test_horse_form(self, info):
        assert await info.get_horse_form("15:00", "York", "O'Brien's Pride") == (
            "Form for O'Brien's Pride: Date: 10/01/2026, Rating: 80; Date: 09/01/2026, Rating: 60"
        )

    @pytest.mark.asyncio
    async def test_horse_form_wrong_race(self, info):
        assert await info.get_horse_form("14:05", "Ascot", "AverageHorse") == (
            "Could not find horse AverageHorse in the 14:05 at Ascot"
        )

    @pytest.mark.asyncio
    async def test_next_race(self, info):
        assert await info.get_next_race(time(14, 0)) == "The next race is at 14:05 at Ascot."
        assert await info.get_next_race(time(13, 0)) == "The next race is at 13:50 at Ascot."

    @pytest.mark.asyncio
    async def test_no_more_races(self, info):
        assert await info.get_next_race(time(16, 0)) == "There are no more races scheduled for today."

    @pytest.mark.asyncio
    async def test_next_race_uses_racing_clock(self, info):
        with patch("raceinfo.queries.service.racing_now") as mock_now:
            mock_now.return_value.time.return_value = time(14, 30)
            assert await info.get_next_race() == "The next race is at 15:00 at York."


# ── Failure paths ──────────────────────────────────────────────────────────


class TestUnavailableData:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("races", [None, {"unexpected": "shape"}, b"not json"])
    async def test_every_query_reports_unavailable(self, make_cache, races):
        info = RacesInfo(make_cache(races))
        answers = [
            await info.get_meetings(),
            await info.get_all_times("Ascot"),
            await info.get_all_runners("14:05", "Ascot"),
            await info.get_odds("14:05", "Ascot"),
            await info.get_top_rated("14:05", "Ascot"),
            await info.get_race_win_percentages_from_all("14:05", "Ascot"),
            await info.get_nap_of_the_day(),
            await info.find_horse_race("GoodHorse"),
            await info.get_past_run_dates("GoodHorse"),
            await info.get_horse_form("14:05", "Ascot", "GoodHorse"),
            await info.get_next_race(time(9, 0)),
        ]
        assert set(answers) == {messages.DATA_UNAVAILABLE}

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_text(self, info):
        with patch.object(info.cache, "get_snapshot", AsyncMock(side_effect=RuntimeError("kaboom"))):
            answer = await info.get_meetings()
        assert answer == "An error occurred while answering get_meetings: kaboom"
