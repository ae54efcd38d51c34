# tests/conftest.py
# Ensure the project root (where the local `pitch_league/` lives) is first on sys.path
import os, sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from pitch_league.repository import LeagueRepository  # noqa: E402


@pytest.fixture
def repository(tmp_path):
    repo = LeagueRepository(str(tmp_path / "league.db"))
    repo.initialize_schema()
    return repo


@pytest.fixture
def league_with_teams(repository):
    """A draft league holding four teams, in joining order."""
    league = repository.create_league("Sunday Five-a-Side", season="2026 Autumn")
    teams = [repository.create_team(name) for name in ("Rovers", "United", "Athletic", "Wanderers")]
    for team in teams:
        repository.add_team_to_league(league.id, team.id)
    return league, teams
