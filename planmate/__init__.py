"""PlanMate backend: accounts, profiles, schedules and a friend graph."""

__version__ = "0.1.0"
