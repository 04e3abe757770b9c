"""Team balancing and randomized assignment."""

from .service import BalanceResult, average_variance, balance_teams, randomize_teams, team_average

__all__ = ["BalanceResult", "average_variance", "balance_teams", "randomize_teams", "team_average"]
