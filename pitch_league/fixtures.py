"""Round-robin fixture generation using the circle method."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .models import Fixture, TeamId

# Sentinel occupying the spare slot when the team count is odd.
_BYE = object()


def round_count(team_count: int) -> int:
    """Return how many rounds a single round-robin for ``team_count`` teams spans."""

    if team_count < 2:
        return 0
    return team_count - 1 if team_count % 2 == 0 else team_count


def generate_fixtures(team_ids: Sequence[TeamId]) -> List[Fixture]:
    """Build a single round-robin schedule for ``team_ids``.

    Every team meets every other team exactly once. Position 0 stays fixed
    while the rest rotate one slot per round; the home side alternates with
    round parity. When the count is odd one team sits out each round.
    Fewer than two teams yields an empty schedule.
    """

    if len(team_ids) < 2:
        return []

    slots: List[object] = list(team_ids)
    if len(slots) % 2 == 1:
        slots.append(_BYE)

    n = len(slots)
    fixtures: List[Fixture] = []

    for round_number in range(1, n):
        for i in range(n // 2):
            first = slots[i]
            second = slots[n - 1 - i]
            if first is _BYE or second is _BYE:
                continue

            if round_number % 2 == 1:
                home, away = first, second
            else:
                home, away = second, first
            fixtures.append(Fixture(home_team_id=home, away_team_id=away, round=round_number))

        slots.insert(1, slots.pop())

    return fixtures


def fixtures_by_round(fixtures: Sequence[Fixture]) -> Dict[int, List[Fixture]]:
    """Group ``fixtures`` per round, keeping their original order."""

    rounds: Dict[int, List[Fixture]] = {}
    for fixture in fixtures:
        rounds.setdefault(fixture.round, []).append(fixture)
    return rounds


def resting_team(team_ids: Sequence[TeamId], fixtures: Sequence[Fixture]) -> Optional[TeamId]:
    """Return the team without a fixture in ``fixtures`` (one round), if any."""

    playing = set()
    for fixture in fixtures:
        playing.add(fixture.home_team_id)
        playing.add(fixture.away_team_id)
    for team_id in team_ids:
        if team_id not in playing:
            return team_id
    return None


__all__ = ["fixtures_by_round", "generate_fixtures", "resting_team", "round_count"]
