"""Domain models for the pitch_league project.

The first group of dataclasses is the value vocabulary of the scheduling and
standings core: fixtures, match results and standing rows. The second group
describes the league workflow records persisted by the repository. All of them
remain storage-agnostic so they can be serialized to JSON when needed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
import uuid
from typing import Optional

TeamId = str


@dataclass(frozen=True)
class Fixture:
    """A scheduled pairing of two teams in a given round."""

    home_team_id: TeamId
    away_team_id: TeamId
    round: int


@dataclass(frozen=True)
class MatchResult:
    """Scoreline of a match; a ``None`` score means it has not been played."""

    match_id: str
    home_team_id: TeamId
    away_team_id: TeamId
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    @property
    def is_played(self) -> bool:
        return self.home_score is not None and self.away_score is not None


@dataclass
class TeamStanding:
    """Aggregate statistics for a team within a league table."""

    team_id: TeamId
    team_name: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0

    def record_result(self, goals_for: int, goals_against: int) -> None:
        """Update the row with one played match from this team's side."""

        self.played += 1
        self.goals_for += goals_for
        self.goals_against += goals_against
        self.goal_difference = self.goals_for - self.goals_against

        if goals_for > goals_against:
            self.won += 1
            self.points += 3
        elif goals_for < goals_against:
            self.lost += 1
        else:
            self.drawn += 1
            self.points += 1


class LeagueStatus(Enum):
    """Lifecycle of a league: teams join while drafting, fixtures exist once active."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class MatchStatus(Enum):
    SCHEDULED = "SCHEDULED"
    PLAYED = "PLAYED"


@dataclass(frozen=True)
class Team:
    """A squad that can enter multiple leagues."""

    id: uuid.UUID
    name: str
    created_at: datetime = field(default_factory=datetime.utcnow)
    captain_name: Optional[str] = None


@dataclass(frozen=True)
class League:
    """A single round-robin competition."""

    id: uuid.UUID
    name: str
    status: LeagueStatus = LeagueStatus.DRAFT
    created_at: datetime = field(default_factory=datetime.utcnow)
    season: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_locked(self) -> bool:
        return self.status is not LeagueStatus.DRAFT


@dataclass(frozen=True)
class LeagueTeam:
    """Association between a league and a team."""

    league_id: uuid.UUID
    team_id: uuid.UUID
    joined_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class Match:
    """A persisted fixture, optionally carrying scheduling metadata and a score."""

    id: uuid.UUID
    league_id: uuid.UUID
    home_team_id: uuid.UUID
    away_team_id: uuid.UUID
    round: int
    status: MatchStatus = MatchStatus.SCHEDULED
    scheduled_on: Optional[date] = None
    kickoff: Optional[time] = None
    venue: Optional[str] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    def to_result(self) -> MatchResult:
        """Return the scoreline in the shape consumed by the standings table."""

        return MatchResult(
            match_id=str(self.id),
            home_team_id=str(self.home_team_id),
            away_team_id=str(self.away_team_id),
            home_score=self.home_score,
            away_score=self.away_score,
        )


__all__ = [
    "Fixture",
    "League",
    "LeagueStatus",
    "LeagueTeam",
    "Match",
    "MatchResult",
    "MatchStatus",
    "Team",
    "TeamId",
    "TeamStanding",
]
