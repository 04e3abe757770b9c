"""Team assignment: snake-draft seeding, swap-based balancing and random shuffles."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
import random
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from teammaker.config import RatingScale, get_scale
from teammaker.models import Player, Team


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

_MAX_PASSES_ENV = "TEAMMAKER_MAX_PASSES"
_MAX_PASSES_DEFAULT = 50
SWAP_EPSILON = 0.001


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _max_passes() -> int:
    return _env_int(_MAX_PASSES_ENV, _MAX_PASSES_DEFAULT, min_value=1)


@dataclass
class BalanceResult:
    teams: List[Team]
    unplaced: List[Player] = field(default_factory=list)
    passes: int = 0
    variance: float = 0.0

    def placed_ids(self) -> List[str]:
        return [player.id for team in self.teams for player in team.players]


def _resolve_scale(scale: RatingScale | str | None) -> RatingScale:
    if isinstance(scale, RatingScale):
        return scale
    return get_scale(scale)


def team_average(players: Sequence[Player], scale: RatingScale | str | None = None) -> float:
    """Mean score of ``players``; an empty roster averages 0."""

    if not players:
        return 0.0
    resolved = _resolve_scale(scale)
    return sum(resolved.score(player.rating) for player in players) / len(players)


def _spread(averages: Sequence[float]) -> float:
    if not averages:
        return 0.0
    mean = sum(averages) / len(averages)
    return sum((value - mean) ** 2 for value in averages)


def average_variance(teams: Iterable[Team], scale: RatingScale | str | None = None) -> float:
    """Sum of squared deviations of each team average from the mean team average."""

    resolved = _resolve_scale(scale)
    return _spread([team_average(team.players, resolved) for team in teams])


def _check_capacity(capacity: int) -> None:
    if capacity < 0:
        raise ValueError(f"capacity must be >= 0, got {capacity}")


def _split_pool(
    teams: Sequence[Team],
    all_players: Iterable[Player],
) -> Tuple[List[List[Player]], List[Player]]:
    """Return each team's locked roster and the flat pool of movable players.

    Movable players come from the teams first (in team order) followed by
    pool players that are not on any team. A player id is taken once, at its
    first slot; later repeats are dropped.
    """

    locked_rosters: List[List[Player]] = []
    movable: List[Player] = []
    seen: Set[str] = set()
    for team in teams:
        roster: List[Player] = []
        for player in team.players:
            if player.id in seen:
                continue
            seen.add(player.id)
            if team.is_locked(player.id):
                roster.append(player)
            else:
                movable.append(player)
        locked_rosters.append(roster)
    for player in all_players:
        if player.id in seen:
            continue
        movable.append(player)
        seen.add(player.id)
    return locked_rosters, movable


def _snake_step(index: int, direction: int, n_teams: int) -> Tuple[int, int]:
    nxt = index + direction
    if 0 <= nxt < n_teams:
        return nxt, direction
    # Bounce: the end team is visited twice in a row (0..N-1, N-1..0).
    return index, -direction


def _snake_draft(
    rosters: List[List[Player]],
    movable: Sequence[Player],
    capacity: int,
    scale: RatingScale,
) -> List[Player]:
    """Distribute ``movable`` best-first in snake order; return players that did not fit."""

    n_teams = len(rosters)
    ordered = sorted(movable, key=lambda player: scale.score(player.rating), reverse=True)
    unplaced: List[Player] = []
    index, direction = 0, 1
    for player in ordered:
        placed = False
        # 2N steps of the snake cursor are enough to visit every team once.
        for _ in range(2 * n_teams):
            if len(rosters[index]) < capacity:
                rosters[index].append(player)
                placed = True
            index, direction = _snake_step(index, direction, n_teams)
            if placed:
                break
        if not placed:
            unplaced.append(player)
    return unplaced


def _find_improving_swap(
    rosters: List[List[Player]],
    locked: Sequence[frozenset],
    averages: Sequence[float],
    current: float,
    scale: RatingScale,
    epsilon: float,
) -> Optional[Tuple[int, int, int, int]]:
    """First swap (team_i, slot_i, team_j, slot_j) lowering the spread by more than ``epsilon``."""

    n_teams = len(rosters)
    for i in range(n_teams):
        for j in range(i + 1, n_teams):
            size_i, size_j = len(rosters[i]), len(rosters[j])
            if abs(size_i - size_j) > 1:
                continue
            total_i = sum(scale.score(player.rating) for player in rosters[i])
            total_j = sum(scale.score(player.rating) for player in rosters[j])
            for slot_i, player_i in enumerate(rosters[i]):
                if player_i.id in locked[i]:
                    continue
                score_i = scale.score(player_i.rating)
                for slot_j, player_j in enumerate(rosters[j]):
                    if player_j.id in locked[j]:
                        continue
                    delta = scale.score(player_j.rating) - score_i
                    trial = list(averages)
                    trial[i] = (total_i + delta) / size_i
                    trial[j] = (total_j - delta) / size_j
                    if current - _spread(trial) > epsilon:
                        return i, slot_i, j, slot_j
    return None


def balance_teams(
    teams: Sequence[Team],
    capacity: int,
    all_players: Iterable[Player],
    *,
    scale: RatingScale | str | None = None,
    max_passes: int | None = None,
    epsilon: float = SWAP_EPSILON,
) -> BalanceResult:
    """Redistribute every unlocked player so team average ratings are as even as possible.

    Locked players never move. Movable players (unlocked team members plus
    pool players on no team) are seeded by a snake draft over a best-first
    ordering, then improved by greedy first-improvement swaps between teams
    whose sizes differ by at most one. The search stops after a pass finds no
    swap that lowers the spread of team averages by more than ``epsilon``, or
    after ``max_passes`` passes.

    Players that do not fit in any team are returned in ``unplaced``. The
    input teams are never modified.
    """

    _check_capacity(capacity)
    resolved = _resolve_scale(scale)
    pass_limit = max_passes if max_passes is not None else _max_passes()

    rosters, movable = _split_pool(teams, all_players)
    if not movable:
        logger.debug("No movable players across %d teams; nothing to balance", len(teams))
        result_teams = [team.with_players(roster) for team, roster in zip(teams, rosters)]
        return BalanceResult(
            teams=result_teams,
            passes=0,
            variance=average_variance(result_teams, resolved),
        )

    unplaced = _snake_draft(rosters, movable, capacity, resolved)
    if unplaced:
        logger.info("%d players did not fit in %d teams of %d", len(unplaced), len(teams), capacity)

    locked = [team.locked_players for team in teams]
    averages = [team_average(roster, resolved) for roster in rosters]
    variance = _spread(averages)

    passes = 0
    while passes < pass_limit:
        passes += 1
        swap = _find_improving_swap(rosters, locked, averages, variance, resolved, epsilon)
        if swap is None:
            break
        i, slot_i, j, slot_j = swap
        rosters[i][slot_i], rosters[j][slot_j] = rosters[j][slot_j], rosters[i][slot_i]
        averages[i] = team_average(rosters[i], resolved)
        averages[j] = team_average(rosters[j], resolved)
        variance = _spread(averages)
        logger.debug(
            "Swapped %s (%s) <-> %s (%s); variance %.4f",
            rosters[j][slot_j].id,
            teams[i].id,
            rosters[i][slot_i].id,
            teams[j].id,
            variance,
        )

    logger.info(
        "Balanced %d players across %d teams in %d passes (variance %.4f)",
        len(movable) - len(unplaced),
        len(teams),
        passes,
        variance,
    )
    return BalanceResult(
        teams=[team.with_players(roster) for team, roster in zip(teams, rosters)],
        unplaced=unplaced,
        passes=passes,
        variance=variance,
    )


def randomize_teams(
    teams: Sequence[Team],
    capacity: int,
    all_players: Iterable[Player],
    *,
    rng: random.Random | None = None,
    scale: RatingScale | str | None = None,
) -> BalanceResult:
    """Shuffle every unlocked player and deal them round-robin into the teams."""

    _check_capacity(capacity)
    resolved = _resolve_scale(scale)
    rng = rng or random.Random()

    rosters, movable = _split_pool(teams, all_players)
    rng.shuffle(movable)

    cursor = 0
    for _ in range(capacity):
        for roster in rosters:
            if cursor < len(movable) and len(roster) < capacity:
                roster.append(movable[cursor])
                cursor += 1
    unplaced = movable[cursor:]

    result_teams = [team.with_players(roster) for team, roster in zip(teams, rosters)]
    return BalanceResult(
        teams=result_teams,
        unplaced=unplaced,
        passes=0,
        variance=average_variance(result_teams, resolved),
    )
