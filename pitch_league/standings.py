"""League table computation from recorded match results."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .models import MatchResult, TeamId, TeamStanding

UNKNOWN_TEAM_NAME = "Unknown"


def standing_sort_key(standing: TeamStanding) -> Tuple[int, int, int]:
    """Ranking key: points, then goal difference, then goals scored (all descending)."""

    return (-standing.points, -standing.goal_difference, -standing.goals_for)


def calculate_standings(
    team_ids: Iterable[TeamId],
    team_names: Optional[Mapping[TeamId, str]],
    results: Iterable[MatchResult],
) -> List[TeamStanding]:
    """Return one ranked :class:`TeamStanding` per team in ``team_ids``.

    Unplayed results and results naming a team outside ``team_ids`` are
    ignored. Teams level on every ranking key keep their input order.
    """

    names = team_names or {}
    table: Dict[TeamId, TeamStanding] = {}
    for team_id in team_ids:
        table[team_id] = TeamStanding(
            team_id=team_id,
            team_name=names.get(team_id) or UNKNOWN_TEAM_NAME,
        )

    for result in results:
        if not result.is_played:
            continue

        home = table.get(result.home_team_id)
        away = table.get(result.away_team_id)
        if home is None or away is None:
            continue

        home.record_result(result.home_score, result.away_score)
        away.record_result(result.away_score, result.home_score)

    return sorted(table.values(), key=standing_sort_key)


__all__ = ["UNKNOWN_TEAM_NAME", "calculate_standings", "standing_sort_key"]
