"""FastAPI application exposing the league workflow: teams, leagues, fixtures and tables."""

from __future__ import annotations

import logging
import os
from datetime import date, time
from typing import List, Optional
import uuid

from fastapi import Depends, FastAPI, HTTPException, Query, status
from pydantic import BaseModel, Field

from .errors import (
    ConflictError,
    InsufficientTeamsError,
    InvalidResultError,
    LeagueError,
    LeagueStateError,
    NotFoundError,
)
from .logging_config import configure_logging
from .models import League, LeagueStatus, Match, Team, TeamStanding
from .repository import LeagueRepository


DATABASE_PATH = os.getenv("PITCH_LEAGUE_DB_PATH", "pitch_league.db")

logger = logging.getLogger(__name__)

app = FastAPI(title="Pitch League API")

_repository = LeagueRepository(DATABASE_PATH)

_ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    LeagueStateError: status.HTTP_400_BAD_REQUEST,
    InsufficientTeamsError: status.HTTP_400_BAD_REQUEST,
    InvalidResultError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
}


@app.on_event("startup")
def _initialize() -> None:
    configure_logging()
    _repository.initialize_schema()
    logger.info("Using database at %s", DATABASE_PATH)


def _http_error(exc: LeagueError) -> HTTPException:
    """Translate a workflow error into an HTTP error carrying its code."""

    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.info("Request rejected (%s): %s", exc.code, exc.message)
    return HTTPException(status_code=status_code, detail={"message": exc.message, "code": exc.code})


def get_repository() -> LeagueRepository:
    """Provide the repository instance for FastAPI dependencies."""

    return _repository


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1)
    captain_name: Optional[str] = None


class TeamResponse(BaseModel):
    id: uuid.UUID
    name: str
    captain_name: Optional[str]


class LeagueCreate(BaseModel):
    name: str = Field(..., min_length=1)
    season: Optional[str] = None
    description: Optional[str] = None


class LeagueUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    season: Optional[str] = None
    description: Optional[str] = None


class LeagueResponse(BaseModel):
    id: uuid.UUID
    name: str
    status: str
    season: Optional[str]
    description: Optional[str]


class LeagueTeamAdd(BaseModel):
    team_id: uuid.UUID


class MatchResponse(BaseModel):
    id: uuid.UUID
    league_id: uuid.UUID
    home_team_id: uuid.UUID
    away_team_id: uuid.UUID
    round: int
    status: str
    scheduled_on: Optional[date]
    kickoff: Optional[time]
    venue: Optional[str]
    home_score: Optional[int]
    away_score: Optional[int]


class MatchScheduleUpdate(BaseModel):
    scheduled_on: Optional[date] = None
    kickoff: Optional[time] = None
    venue: Optional[str] = None


class ResultCreate(BaseModel):
    home_score: int = Field(..., ge=0)
    away_score: int = Field(..., ge=0)


class StandingResponse(BaseModel):
    team_id: str
    team_name: str
    played: int
    won: int
    drawn: int
    lost: int
    goals_for: int
    goals_against: int
    goal_difference: int
    points: int


def _team_to_response(team: Team) -> TeamResponse:
    return TeamResponse(id=team.id, name=team.name, captain_name=team.captain_name)


def _league_to_response(league: League) -> LeagueResponse:
    return LeagueResponse(
        id=league.id,
        name=league.name,
        status=league.status.value,
        season=league.season,
        description=league.description,
    )


def _match_to_response(match: Match) -> MatchResponse:
    return MatchResponse(
        id=match.id,
        league_id=match.league_id,
        home_team_id=match.home_team_id,
        away_team_id=match.away_team_id,
        round=match.round,
        status=match.status.value,
        scheduled_on=match.scheduled_on,
        kickoff=match.kickoff,
        venue=match.venue,
        home_score=match.home_score,
        away_score=match.away_score,
    )


def _standing_to_response(standing: TeamStanding) -> StandingResponse:
    return StandingResponse(
        team_id=standing.team_id,
        team_name=standing.team_name,
        played=standing.played,
        won=standing.won,
        drawn=standing.drawn,
        lost=standing.lost,
        goals_for=standing.goals_for,
        goals_against=standing.goals_against,
        goal_difference=standing.goal_difference,
        points=standing.points,
    )


def _parse_status(value: Optional[str]) -> Optional[LeagueStatus]:
    if value is None:
        return None
    try:
        return LeagueStatus(value.upper())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown league status: {value}",
        )


@app.post("/teams", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_team(
    payload: TeamCreate,
    repository: LeagueRepository = Depends(get_repository),
) -> TeamResponse:
    team = repository.create_team(payload.name, captain_name=payload.captain_name)
    return _team_to_response(team)


@app.get("/teams", response_model=List[TeamResponse])
def list_teams(
    repository: LeagueRepository = Depends(get_repository),
) -> List[TeamResponse]:
    return [_team_to_response(team) for team in repository.list_teams()]


@app.get("/teams/{team_id}", response_model=TeamResponse)
def get_team(
    team_id: uuid.UUID,
    repository: LeagueRepository = Depends(get_repository),
) -> TeamResponse:
    team = repository.get_team(team_id)
    if team is None:
        raise _http_error(NotFoundError("Team not found"))
    return _team_to_response(team)


@app.post("/leagues", response_model=LeagueResponse, status_code=status.HTTP_201_CREATED)
def create_league(
    payload: LeagueCreate,
    repository: LeagueRepository = Depends(get_repository),
) -> LeagueResponse:
    league = repository.create_league(
        payload.name,
        season=payload.season,
        description=payload.description,
    )
    return _league_to_response(league)


@app.get("/leagues", response_model=List[LeagueResponse])
def list_leagues(
    status_filter: Optional[str] = Query(None, alias="status"),
    repository: LeagueRepository = Depends(get_repository),
) -> List[LeagueResponse]:
    leagues = repository.list_leagues(status=_parse_status(status_filter))
    return [_league_to_response(league) for league in leagues]


@app.get("/leagues/{league_id}", response_model=LeagueResponse)
def get_league(
    league_id: uuid.UUID,
    repository: LeagueRepository = Depends(get_repository),
) -> LeagueResponse:
    league = repository.get_league(league_id)
    if league is None:
        raise _http_error(NotFoundError("League not found"))
    return _league_to_response(league)


@app.patch("/leagues/{league_id}", response_model=LeagueResponse)
def update_league(
    league_id: uuid.UUID,
    payload: LeagueUpdate,
    repository: LeagueRepository = Depends(get_repository),
) -> LeagueResponse:
    try:
        league = repository.update_league(
            league_id,
            name=payload.name,
            season=payload.season,
            description=payload.description,
        )
    except LeagueError as exc:
        raise _http_error(exc)
    return _league_to_response(league)


@app.get("/leagues/{league_id}/teams", response_model=List[TeamResponse])
def list_league_teams(
    league_id: uuid.UUID,
    repository: LeagueRepository = Depends(get_repository),
) -> List[TeamResponse]:
    try:
        teams = repository.list_league_teams(league_id)
    except LeagueError as exc:
        raise _http_error(exc)
    return [_team_to_response(team) for team in teams]


@app.post("/leagues/{league_id}/teams", status_code=status.HTTP_201_CREATED)
def add_league_team(
    league_id: uuid.UUID,
    payload: LeagueTeamAdd,
    repository: LeagueRepository = Depends(get_repository),
) -> dict:
    try:
        membership = repository.add_team_to_league(league_id, payload.team_id)
    except LeagueError as exc:
        raise _http_error(exc)
    return {"league_id": str(membership.league_id), "team_id": str(membership.team_id)}


@app.delete("/leagues/{league_id}/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_league_team(
    league_id: uuid.UUID,
    team_id: uuid.UUID,
    repository: LeagueRepository = Depends(get_repository),
) -> None:
    try:
        repository.remove_team_from_league(league_id, team_id)
    except LeagueError as exc:
        raise _http_error(exc)


@app.post("/leagues/{league_id}/lock", response_model=LeagueResponse)
def lock_league(
    league_id: uuid.UUID,
    generate_schedule: bool = True,
    repository: LeagueRepository = Depends(get_repository),
) -> LeagueResponse:
    try:
        league = repository.lock_league(league_id, generate_schedule=generate_schedule)
    except LeagueError as exc:
        raise _http_error(exc)
    return _league_to_response(league)


@app.post(
    "/leagues/{league_id}/generate-schedule",
    response_model=List[MatchResponse],
    status_code=status.HTTP_201_CREATED,
)
def generate_schedule(
    league_id: uuid.UUID,
    repository: LeagueRepository = Depends(get_repository),
) -> List[MatchResponse]:
    try:
        matches = repository.generate_schedule(league_id)
    except LeagueError as exc:
        raise _http_error(exc)
    return [_match_to_response(match) for match in matches]


@app.post("/leagues/{league_id}/complete", response_model=LeagueResponse)
def complete_league(
    league_id: uuid.UUID,
    repository: LeagueRepository = Depends(get_repository),
) -> LeagueResponse:
    try:
        league = repository.complete_league(league_id)
    except LeagueError as exc:
        raise _http_error(exc)
    return _league_to_response(league)


@app.get("/leagues/{league_id}/matches", response_model=List[MatchResponse])
def list_matches(
    league_id: uuid.UUID,
    repository: LeagueRepository = Depends(get_repository),
) -> List[MatchResponse]:
    try:
        matches = repository.list_matches(league_id)
    except LeagueError as exc:
        raise _http_error(exc)
    return [_match_to_response(match) for match in matches]


@app.get("/leagues/{league_id}/standings", response_model=List[StandingResponse])
def get_standings(
    league_id: uuid.UUID,
    repository: LeagueRepository = Depends(get_repository),
) -> List[StandingResponse]:
    try:
        standings = repository.compute_league_standings(league_id)
    except LeagueError as exc:
        raise _http_error(exc)
    return [_standing_to_response(standing) for standing in standings]


@app.get("/matches/{match_id}", response_model=MatchResponse)
def get_match(
    match_id: uuid.UUID,
    repository: LeagueRepository = Depends(get_repository),
) -> MatchResponse:
    match = repository.get_match(match_id)
    if match is None:
        raise _http_error(NotFoundError("Match not found"))
    return _match_to_response(match)


@app.patch("/matches/{match_id}", response_model=MatchResponse)
def schedule_match(
    match_id: uuid.UUID,
    payload: MatchScheduleUpdate,
    repository: LeagueRepository = Depends(get_repository),
) -> MatchResponse:
    try:
        match = repository.schedule_match(match_id, **payload.dict(exclude_unset=True))
    except LeagueError as exc:
        raise _http_error(exc)
    return _match_to_response(match)


@app.post(
    "/matches/{match_id}/result",
    response_model=MatchResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_result(
    match_id: uuid.UUID,
    payload: ResultCreate,
    repository: LeagueRepository = Depends(get_repository),
) -> MatchResponse:
    try:
        match = repository.record_result(
            match_id,
            home_score=payload.home_score,
            away_score=payload.away_score,
        )
    except LeagueError as exc:
        raise _http_error(exc)
    return _match_to_response(match)
