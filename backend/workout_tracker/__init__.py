"""Workout Tracker: live workout session tracking from location fixes."""

__version__ = "0.1.0"
