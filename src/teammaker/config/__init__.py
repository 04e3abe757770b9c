"""Configuration helpers for rating scales and roster defaults."""

from .ratings import (
    DEFAULT_CAPACITY,
    DEFAULT_ROSTER,
    DEFAULT_SCALE,
    DEFAULT_TEAM_COUNT,
    VALID_RATINGS,
    RatingScale,
    default_team_layout,
    get_scale,
    iter_scales,
)

__all__ = [
    "DEFAULT_CAPACITY",
    "DEFAULT_ROSTER",
    "DEFAULT_SCALE",
    "DEFAULT_TEAM_COUNT",
    "VALID_RATINGS",
    "RatingScale",
    "default_team_layout",
    "get_scale",
    "iter_scales",
]
