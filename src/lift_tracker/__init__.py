"""Workout log with calendar-accurate streak and adherence tracking."""

__version__ = "0.4.0"
