"""Roster management and team balancing."""

__version__ = "0.1.0"
