"""Lookups, rankings and the query service built on them."""

from raceinfo.queries.index import RaceIndex
from raceinfo.queries.ranking import NapFilter, RatingStrategy
from raceinfo.queries.service import RacesInfo

__all__ = ["NapFilter", "RaceIndex", "RacesInfo", "RatingStrategy"]
