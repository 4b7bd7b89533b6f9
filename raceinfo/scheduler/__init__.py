"""Background scheduling for the daily snapshot refresh."""

from raceinfo.scheduler.manager import SchedulerManager

__all__ = ["SchedulerManager"]
