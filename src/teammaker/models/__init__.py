"""Domain models."""

from .player import Player, Rating, Team, normalize_rating

__all__ = ["Player", "Rating", "Team", "normalize_rating"]
