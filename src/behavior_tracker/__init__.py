"""Behavior Tracker: school behavior-tracking dashboard."""

__version__ = "0.1.0"
