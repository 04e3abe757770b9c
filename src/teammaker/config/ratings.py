"""Rating scales and default roster layout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple


@dataclass(frozen=True)
class RatingScale:
    name: str
    grades: Tuple[str, ...]
    scores: Mapping[str, float]

    def score(self, grade: str) -> float:
        """Numeric score for ``grade``, raising KeyError for grades outside the scale."""

        if grade not in self.scores:
            raise KeyError(f"Rating {grade!r} is not part of the {self.name!r} scale")
        return self.scores[grade]


_RATING_SCALES: Dict[str, RatingScale] = {
    "standard": RatingScale(
        name="standard",
        grades=("A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "D-"),
        scores={
            "A+": 4.3,
            "A": 4.0,
            "A-": 3.7,
            "B+": 3.3,
            "B": 3.0,
            "B-": 2.7,
            "C+": 2.3,
            "C": 2.0,
            "C-": 1.7,
            "D+": 1.3,
            "D": 1.0,
            "D-": 0.7,
        },
    ),
    "simple": RatingScale(
        name="simple",
        grades=("A", "B", "C", "D"),
        scores={"A": 4.0, "B": 3.0, "C": 2.0, "D": 1.0},
    ),
}

DEFAULT_SCALE = "standard"
DEFAULT_TEAM_COUNT = 8
DEFAULT_CAPACITY = 4

# Ratings accepted anywhere a player is stored; every scale is a subset.
VALID_RATINGS: Tuple[str, ...] = _RATING_SCALES["standard"].grades

DEFAULT_ROSTER: Tuple[Tuple[str, str], ...] = (
    ("Pops", "B-"),
    ("Kevin", "A-"),
    ("Dylan", "B+"),
    ("Connor", "B"),
    ("Allen", "C+"),
    ("Eric W.", "C"),
    ("Uncle Tim", "C"),
    ("Tim", "B-"),
    ("Jimmy", "C+"),
    ("Kyle", "B"),
    ("Eric R.", "C"),
    ("Scott", "C-"),
    ("Cory", "B+"),
    ("Mom", "D+"),
    ("Jared", "C"),
    ("Joe R.", "C"),
    ("Sean G.", "C+"),
    ("Don", "A"),
    ("Stephen", "B"),
    ("Christian", "C"),
    ("Samantha", "D"),
    ("Eric", "C"),
    ("Rob E.", "C"),
    ("Mark G.", "B"),
    ("Mark N.", "C+"),
    ("Mark G Sr.", "C-"),
    ("Tim H.", "C"),
    ("Tony", "B-"),
    ("Austin H.", "C"),
    ("Sean M.", "C"),
    ("TBD", "C"),
    ("TBD", "C"),
)


def iter_scales() -> Iterable[RatingScale]:
    """Return an iterator of all configured rating scales."""

    return _RATING_SCALES.values()


def get_scale(name: str | None = None) -> RatingScale:
    """Fetch a rating scale by name, raising KeyError if missing."""

    key = (name or DEFAULT_SCALE).lower()
    if key not in _RATING_SCALES:
        raise KeyError(f"No rating scale configured for name={name!r}")
    return _RATING_SCALES[key]


def default_team_layout(count: int = DEFAULT_TEAM_COUNT) -> list[tuple[str, str]]:
    """Ids and display names for a fresh set of empty teams."""

    return [(f"team-{idx}", f"Team {idx}") for idx in range(1, count + 1)]
