from __future__ import annotations

from datetime import date, time
import uuid

import pytest

from pitch_league.errors import (
    ConflictError,
    InsufficientTeamsError,
    InvalidResultError,
    LeagueStateError,
    NotFoundError,
)
from pitch_league.models import LeagueStatus, MatchStatus


def test_create_and_list_teams(repository):
    repository.create_team("United", captain_name="Sam")
    repository.create_team("Athletic")
    teams = repository.list_teams()
    assert [t.name for t in teams] == ["Athletic", "United"]
    assert teams[1].captain_name == "Sam"
    assert repository.get_team(teams[0].id) == teams[0]
    assert repository.get_team(uuid.uuid4()) is None


def test_league_starts_as_draft(repository):
    league = repository.create_league("Midweek", description="Tuesday nights")
    stored = repository.get_league(league.id)
    assert stored.status is LeagueStatus.DRAFT
    assert stored.description == "Tuesday nights"
    assert repository.list_leagues(status=LeagueStatus.ACTIVE) == []
    assert [l.id for l in repository.list_leagues(status=LeagueStatus.DRAFT)] == [league.id]


def test_membership_rules(repository, league_with_teams):
    league, teams = league_with_teams
    assert [t.id for t in repository.list_league_teams(league.id)] == [t.id for t in teams]

    with pytest.raises(ConflictError) as exc:
        repository.add_team_to_league(league.id, teams[0].id)
    assert exc.value.code == "ALREADY_MEMBER"

    with pytest.raises(NotFoundError):
        repository.add_team_to_league(league.id, uuid.uuid4())

    repository.remove_team_from_league(league.id, teams[3].id)
    assert len(repository.list_league_teams(league.id)) == 3
    with pytest.raises(NotFoundError):
        repository.remove_team_from_league(league.id, teams[3].id)


def test_lock_requires_two_teams(repository):
    league = repository.create_league("Tiny")
    team = repository.create_team("Loners")
    repository.add_team_to_league(league.id, team.id)
    with pytest.raises(InsufficientTeamsError):
        repository.lock_league(league.id)
    assert repository.get_league(league.id).status is LeagueStatus.DRAFT


def test_lock_generates_round_robin(repository, league_with_teams):
    league, teams = league_with_teams
    locked = repository.lock_league(league.id)
    assert locked.status is LeagueStatus.ACTIVE

    matches = repository.list_matches(league.id)
    assert len(matches) == 6
    assert [m.round for m in matches] == [1, 1, 2, 2, 3, 3]
    assert matches[0].home_team_id == teams[0].id
    assert matches[0].away_team_id == teams[3].id
    assert all(m.status is MatchStatus.SCHEDULED for m in matches)

    with pytest.raises(LeagueStateError) as exc:
        repository.add_team_to_league(league.id, repository.create_team("Late").id)
    assert exc.value.code == "LEAGUE_LOCKED"
    with pytest.raises(LeagueStateError):
        repository.update_league(league.id, name="Renamed")
    with pytest.raises(LeagueStateError):
        repository.lock_league(league.id)


def test_generate_schedule_only_once(repository, league_with_teams):
    league, _ = league_with_teams
    with pytest.raises(LeagueStateError) as exc:
        repository.generate_schedule(league.id)
    assert exc.value.code == "LEAGUE_NOT_LOCKED"

    repository.lock_league(league.id, generate_schedule=False)
    assert repository.list_matches(league.id) == []

    created = repository.generate_schedule(league.id)
    assert len(created) == 6
    with pytest.raises(ConflictError) as exc:
        repository.generate_schedule(league.id)
    assert exc.value.code == "SCHEDULE_EXISTS"


def test_record_result_and_standings(repository, league_with_teams):
    league, teams = league_with_teams
    repository.lock_league(league.id)
    first = repository.list_matches(league.id)[0]

    played = repository.record_result(first.id, home_score=2, away_score=1)
    assert played.status is MatchStatus.PLAYED
    assert (played.home_score, played.away_score) == (2, 1)

    with pytest.raises(ConflictError):
        repository.record_result(first.id, home_score=0, away_score=0)

    table = repository.compute_league_standings(league.id)
    assert len(table) == 4
    assert table[0].team_id == str(teams[0].id)
    assert table[0].team_name == "Rovers"
    assert (table[0].points, table[0].goal_difference) == (3, 1)
    assert table[-1].team_id == str(teams[3].id)
    assert table[-1].lost == 1


def test_record_result_rejects_bad_scores(repository, league_with_teams):
    league, _ = league_with_teams
    repository.lock_league(league.id)
    match = repository.list_matches(league.id)[0]
    with pytest.raises(InvalidResultError):
        repository.record_result(match.id, home_score=-1, away_score=0)
    with pytest.raises(NotFoundError):
        repository.record_result(uuid.uuid4(), home_score=1, away_score=0)


def test_schedule_match_keeps_pairing(repository, league_with_teams):
    league, _ = league_with_teams
    repository.lock_league(league.id)
    match = repository.list_matches(league.id)[0]

    updated = repository.schedule_match(
        match.id, scheduled_on=date(2026, 11, 1), kickoff=time(19, 30), venue="Pitch 3"
    )
    assert updated.scheduled_on == date(2026, 11, 1)
    assert updated.kickoff == time(19, 30)
    assert (updated.home_team_id, updated.away_team_id, updated.round) == (
        match.home_team_id,
        match.away_team_id,
        match.round,
    )

    again = repository.schedule_match(match.id, venue="Pitch 1")
    assert again.venue == "Pitch 1"
    assert again.kickoff == time(19, 30)


def test_complete_league_requires_all_results(repository):
    league = repository.create_league("Pair")
    for name in ("North", "South"):
        repository.add_team_to_league(league.id, repository.create_team(name).id)
    repository.lock_league(league.id)

    with pytest.raises(LeagueStateError) as exc:
        repository.complete_league(league.id)
    assert exc.value.code == "MATCHES_PENDING"

    (only,) = repository.list_matches(league.id)
    repository.record_result(only.id, home_score=0, away_score=0)
    assert repository.complete_league(league.id).status is LeagueStatus.COMPLETED


def test_standings_for_empty_league(repository):
    league = repository.create_league("Empty")
    assert repository.compute_league_standings(league.id) == []
    with pytest.raises(NotFoundError):
        repository.compute_league_standings(uuid.uuid4())


def test_complete_league_requires_a_schedule(repository, league_with_teams):
    league, _ = league_with_teams
    repository.lock_league(league.id, generate_schedule=False)

    with pytest.raises(LeagueStateError) as exc:
        repository.complete_league(league.id)
    assert exc.value.code == "NO_SCHEDULE"
    assert repository.get_league(league.id).status is LeagueStatus.ACTIVE

    assert len(repository.generate_schedule(league.id)) == 6


def test_schedule_match_can_clear_metadata(repository, league_with_teams):
    league, _ = league_with_teams
    repository.lock_league(league.id)
    match = repository.list_matches(league.id)[0]
    repository.schedule_match(match.id, scheduled_on=date(2026, 11, 1), kickoff=time(10, 0), venue="Pitch 2")

    cleared = repository.schedule_match(match.id, venue=None, kickoff=None)
    assert cleared.venue is None
    assert cleared.kickoff is None
    assert cleared.scheduled_on == date(2026, 11, 1)
