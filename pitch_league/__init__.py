"""pitch_league package exposing the scheduling core, domain models and repository."""

from .fixtures import fixtures_by_round, generate_fixtures, resting_team, round_count
from .models import (
    Fixture,
    League,
    LeagueStatus,
    LeagueTeam,
    Match,
    MatchResult,
    MatchStatus,
    Team,
    TeamStanding,
)
from .repository import LeagueRepository
from .standings import UNKNOWN_TEAM_NAME, calculate_standings, standing_sort_key

__all__ = [
    "Fixture",
    "League",
    "LeagueRepository",
    "LeagueStatus",
    "LeagueTeam",
    "Match",
    "MatchResult",
    "MatchStatus",
    "Team",
    "TeamStanding",
    "UNKNOWN_TEAM_NAME",
    "calculate_standings",
    "fixtures_by_round",
    "generate_fixtures",
    "resting_team",
    "round_count",
    "standing_sort_key",
]
