"""SQLite repository driving the league workflow around the scheduling core."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, time
from typing import Any, Iterator, List, Optional
import uuid

from .errors import (
    ConflictError,
    InsufficientTeamsError,
    InvalidResultError,
    LeagueStateError,
    NotFoundError,
)
from .fixtures import generate_fixtures
from .models import (
    League,
    LeagueStatus,
    LeagueTeam,
    Match,
    MatchStatus,
    Team,
    TeamStanding,
)
from .standings import calculate_standings

logger = logging.getLogger(__name__)

# Marks a keyword argument the caller did not pass.
_UNSET = object()


def _iso_datetime(value: datetime) -> str:
    return value.replace(microsecond=0).isoformat(timespec="seconds")


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _iso_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _iso_time(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None


def _parse_time(value: Optional[str]) -> Optional[time]:
    return time.fromisoformat(value) if value else None


def _as_uuid(value: str) -> uuid.UUID:
    return uuid.UUID(value)


def _row_to_team(row: sqlite3.Row) -> Team:
    return Team(
        id=_as_uuid(row["id"]),
        name=row["name"],
        created_at=_parse_datetime(row["created_at"]),
        captain_name=row["captain_name"],
    )


def _row_to_league(row: sqlite3.Row) -> League:
    return League(
        id=_as_uuid(row["id"]),
        name=row["name"],
        status=LeagueStatus(row["status"]),
        created_at=_parse_datetime(row["created_at"]),
        season=row["season"],
        description=row["description"],
    )


def _row_to_match(row: sqlite3.Row) -> Match:
    return Match(
        id=_as_uuid(row["id"]),
        league_id=_as_uuid(row["league_id"]),
        home_team_id=_as_uuid(row["home_team_id"]),
        away_team_id=_as_uuid(row["away_team_id"]),
        round=row["round"],
        status=MatchStatus(row["status"]),
        scheduled_on=_parse_date(row["scheduled_on"]),
        kickoff=_parse_time(row["kickoff"]),
        venue=row["venue"],
        home_score=row["home_score"],
        away_score=row["away_score"],
    )


class LeagueRepository:
    """Persistence layer backed by SQLite."""

    def __init__(self, path: str) -> None:
        self._path = path

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def initialize_schema(self) -> None:
        """Create tables if they do not already exist."""

        with self._connection() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS teams (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    captain_name TEXT
                );

                CREATE TABLE IF NOT EXISTS leagues (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'DRAFT',
                    created_at TEXT NOT NULL,
                    season TEXT,
                    description TEXT
                );

                CREATE TABLE IF NOT EXISTS league_teams (
                    league_id TEXT NOT NULL,
                    team_id TEXT NOT NULL,
                    joined_at TEXT NOT NULL,
                    PRIMARY KEY (league_id, team_id),
                    FOREIGN KEY (league_id) REFERENCES leagues (id) ON DELETE CASCADE,
                    FOREIGN KEY (team_id) REFERENCES teams (id) ON DELETE CASCADE
                );

                CREATE TABLE IF NOT EXISTS matches (
                    id TEXT PRIMARY KEY,
                    league_id TEXT NOT NULL,
                    home_team_id TEXT NOT NULL,
                    away_team_id TEXT NOT NULL,
                    round INTEGER NOT NULL,
                    status TEXT NOT NULL DEFAULT 'SCHEDULED',
                    scheduled_on TEXT,
                    kickoff TEXT,
                    venue TEXT,
                    home_score INTEGER,
                    away_score INTEGER,
                    FOREIGN KEY (league_id) REFERENCES leagues (id) ON DELETE CASCADE,
                    FOREIGN KEY (home_team_id) REFERENCES teams (id),
                    FOREIGN KEY (away_team_id) REFERENCES teams (id)
                );
                """
            )

    # Team operations ---------------------------------------------------
    def create_team(self, name: str, *, captain_name: Optional[str] = None) -> Team:
        team = Team(id=uuid.uuid4(), name=name, captain_name=captain_name)
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO teams (id, name, created_at, captain_name) VALUES (?, ?, ?, ?)",
                (str(team.id), team.name, _iso_datetime(team.created_at), team.captain_name),
            )
        return team

    def get_team(self, team_id: uuid.UUID) -> Optional[Team]:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM teams WHERE id = ?", (str(team_id),)).fetchone()
        return _row_to_team(row) if row is not None else None

    def list_teams(self) -> List[Team]:
        with self._connection() as conn:
            rows = conn.execute("SELECT * FROM teams ORDER BY name").fetchall()
        return [_row_to_team(row) for row in rows]

    # League operations -------------------------------------------------
    def create_league(
        self,
        name: str,
        *,
        season: Optional[str] = None,
        description: Optional[str] = None,
    ) -> League:
        league = League(id=uuid.uuid4(), name=name, season=season, description=description)
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO leagues (id, name, status, created_at, season, description)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    str(league.id),
                    league.name,
                    league.status.value,
                    _iso_datetime(league.created_at),
                    league.season,
                    league.description,
                ),
            )
        return league

    def get_league(self, league_id: uuid.UUID) -> Optional[League]:
        with self._connection() as conn:
            return self._fetch_league(conn, league_id)

    def list_leagues(self, *, status: Optional[LeagueStatus] = None) -> List[League]:
        query = "SELECT * FROM leagues"
        params: tuple = ()
        if status is not None:
            query += " WHERE status = ?"
            params = (status.value,)
        query += " ORDER BY created_at, rowid"
        with self._connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_league(row) for row in rows]

    def update_league(
        self,
        league_id: uuid.UUID,
        *,
        name: Optional[str] = None,
        season: Optional[str] = None,
        description: Optional[str] = None,
    ) -> League:
        with self._connection() as conn:
            league = self._require_league(conn, league_id)
            self._require_draft(league, "Cannot update a locked league")
            conn.execute(
                "UPDATE leagues SET name = ?, season = ?, description = ? WHERE id = ?",
                (
                    name if name is not None else league.name,
                    season if season is not None else league.season,
                    description if description is not None else league.description,
                    str(league_id),
                ),
            )
            return self._require_league(conn, league_id)

    # Membership operations ---------------------------------------------
    def add_team_to_league(self, league_id: uuid.UUID, team_id: uuid.UUID) -> LeagueTeam:
        membership = LeagueTeam(league_id=league_id, team_id=team_id)
        with self._connection() as conn:
            league = self._require_league(conn, league_id)
            self._require_draft(league, "Cannot add teams to a locked league")
            if conn.execute("SELECT 1 FROM teams WHERE id = ?", (str(team_id),)).fetchone() is None:
                raise NotFoundError("Team not found")
            existing = conn.execute(
                "SELECT 1 FROM league_teams WHERE league_id = ? AND team_id = ?",
                (str(league_id), str(team_id)),
            ).fetchone()
            if existing is not None:
                raise ConflictError("Team is already in this league", code="ALREADY_MEMBER")
            conn.execute(
                "INSERT INTO league_teams (league_id, team_id, joined_at) VALUES (?, ?, ?)",
                (str(league_id), str(team_id), _iso_datetime(membership.joined_at)),
            )
        return membership

    def remove_team_from_league(self, league_id: uuid.UUID, team_id: uuid.UUID) -> None:
        with self._connection() as conn:
            league = self._require_league(conn, league_id)
            self._require_draft(league, "Cannot remove teams from a locked league")
            cursor = conn.execute(
                "DELETE FROM league_teams WHERE league_id = ? AND team_id = ?",
                (str(league_id), str(team_id)),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Team is not in this league")

    def list_league_teams(self, league_id: uuid.UUID) -> List[Team]:
        with self._connection() as conn:
            self._require_league(conn, league_id)
            return self._fetch_league_teams(conn, league_id)

    # Lifecycle operations ----------------------------------------------
    def lock_league(self, league_id: uuid.UUID, *, generate_schedule: bool = True) -> League:
        """Move a draft league to ACTIVE, materializing its fixtures by default."""

        with self._connection() as conn:
            league = self._require_league(conn, league_id)
            self._require_draft(league, "League is already locked")
            teams = self._fetch_league_teams(conn, league_id)
            if len(teams) < 2:
                raise InsufficientTeamsError("League must have at least 2 teams before locking")

            conn.execute(
                "UPDATE leagues SET status = ? WHERE id = ?",
                (LeagueStatus.ACTIVE.value, str(league_id)),
            )
            if generate_schedule:
                self._insert_fixtures(conn, league_id, teams)
            logger.info("Locked league %s with %d teams", league_id, len(teams))
            return self._require_league(conn, league_id)

    def generate_schedule(self, league_id: uuid.UUID) -> List[Match]:
        """Create the round-robin matches for an active league that has none yet."""

        with self._connection() as conn:
            league = self._require_league(conn, league_id)
            if league.status is not LeagueStatus.ACTIVE:
                raise LeagueStateError(
                    "League must be locked (ACTIVE) before generating schedule",
                    code="LEAGUE_NOT_LOCKED",
                )
            existing = conn.execute(
                "SELECT 1 FROM matches WHERE league_id = ? LIMIT 1", (str(league_id),)
            ).fetchone()
            if existing is not None:
                raise ConflictError("Schedule already generated for this league", code="SCHEDULE_EXISTS")

            teams = self._fetch_league_teams(conn, league_id)
            if len(teams) < 2:
                raise InsufficientTeamsError("League must have at least 2 teams")
            return self._insert_fixtures(conn, league_id, teams)

    def complete_league(self, league_id: uuid.UUID) -> League:
        with self._connection() as conn:
            league = self._require_league(conn, league_id)
            if league.status is not LeagueStatus.ACTIVE:
                raise LeagueStateError("Only an active league can be completed", code="LEAGUE_NOT_LOCKED")
            scheduled = conn.execute(
                "SELECT COUNT(*) FROM matches WHERE league_id = ?", (str(league_id),)
            ).fetchone()[0]
            if not scheduled:
                raise LeagueStateError("League has no schedule to complete", code="NO_SCHEDULE")
            pending = conn.execute(
                "SELECT COUNT(*) FROM matches WHERE league_id = ? AND status != ?",
                (str(league_id), MatchStatus.PLAYED.value),
            ).fetchone()[0]
            if pending:
                raise LeagueStateError(
                    f"{pending} match(es) still have no result", code="MATCHES_PENDING"
                )
            conn.execute(
                "UPDATE leagues SET status = ? WHERE id = ?",
                (LeagueStatus.COMPLETED.value, str(league_id)),
            )
            logger.info("Completed league %s", league_id)
            return self._require_league(conn, league_id)

    # Match operations --------------------------------------------------
    def list_matches(self, league_id: uuid.UUID) -> List[Match]:
        with self._connection() as conn:
            self._require_league(conn, league_id)
            return self._fetch_matches(conn, league_id)

    def get_match(self, match_id: uuid.UUID) -> Optional[Match]:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM matches WHERE id = ?", (str(match_id),)).fetchone()
        return _row_to_match(row) if row is not None else None

    def schedule_match(
        self,
        match_id: uuid.UUID,
        *,
        scheduled_on: Any = _UNSET,
        kickoff: Any = _UNSET,
        venue: Any = _UNSET,
    ) -> Match:
        """Attach date, kickoff time or venue to a match without touching its pairing.

        Omitted fields keep their stored value; passing ``None`` clears one.
        """

        with self._connection() as conn:
            match = self._require_match(conn, match_id)
            conn.execute(
                "UPDATE matches SET scheduled_on = ?, kickoff = ?, venue = ? WHERE id = ?",
                (
                    _iso_date(match.scheduled_on if scheduled_on is _UNSET else scheduled_on),
                    _iso_time(match.kickoff if kickoff is _UNSET else kickoff),
                    match.venue if venue is _UNSET else venue,
                    str(match_id),
                ),
            )
            return self._require_match(conn, match_id)

    def record_result(self, match_id: uuid.UUID, *, home_score: int, away_score: int) -> Match:
        for label, score in (("home_score", home_score), ("away_score", away_score)):
            if isinstance(score, bool) or not isinstance(score, int) or score < 0:
                raise InvalidResultError(f"{label} must be a non-negative integer")

        with self._connection() as conn:
            match = self._require_match(conn, match_id)
            if match.status is MatchStatus.PLAYED:
                raise ConflictError("Result already recorded for this match", code="RESULT_EXISTS")
            conn.execute(
                "UPDATE matches SET home_score = ?, away_score = ?, status = ? WHERE id = ?",
                (home_score, away_score, MatchStatus.PLAYED.value, str(match_id)),
            )
            logger.info("Recorded %d-%d for match %s", home_score, away_score, match_id)
            return self._require_match(conn, match_id)

    # Reporting helpers -------------------------------------------------
    def compute_league_standings(self, league_id: uuid.UUID) -> List[TeamStanding]:
        with self._connection() as conn:
            self._require_league(conn, league_id)
            teams = self._fetch_league_teams(conn, league_id)
            matches = self._fetch_matches(conn, league_id)

        if not teams:
            return []
        return calculate_standings(
            [str(team.id) for team in teams],
            {str(team.id): team.name for team in teams},
            [match.to_result() for match in matches],
        )

    # Internal helpers --------------------------------------------------
    def _fetch_league(self, conn: sqlite3.Connection, league_id: uuid.UUID) -> Optional[League]:
        row = conn.execute("SELECT * FROM leagues WHERE id = ?", (str(league_id),)).fetchone()
        return _row_to_league(row) if row is not None else None

    def _require_league(self, conn: sqlite3.Connection, league_id: uuid.UUID) -> League:
        league = self._fetch_league(conn, league_id)
        if league is None:
            raise NotFoundError("League not found")
        return league

    def _require_match(self, conn: sqlite3.Connection, match_id: uuid.UUID) -> Match:
        row = conn.execute("SELECT * FROM matches WHERE id = ?", (str(match_id),)).fetchone()
        if row is None:
            raise NotFoundError("Match not found")
        return _row_to_match(row)

    @staticmethod
    def _require_draft(league: League, message: str) -> None:
        if league.is_locked:
            raise LeagueStateError(message, code="LEAGUE_LOCKED")

    def _fetch_league_teams(self, conn: sqlite3.Connection, league_id: uuid.UUID) -> List[Team]:
        rows = conn.execute(
            """
            SELECT teams.* FROM league_teams
            JOIN teams ON teams.id = league_teams.team_id
            WHERE league_teams.league_id = ?
            ORDER BY league_teams.rowid
            """,
            (str(league_id),),
        ).fetchall()
        return [_row_to_team(row) for row in rows]

    def _fetch_matches(self, conn: sqlite3.Connection, league_id: uuid.UUID) -> List[Match]:
        rows = conn.execute(
            "SELECT * FROM matches WHERE league_id = ? ORDER BY round, rowid",
            (str(league_id),),
        ).fetchall()
        return [_row_to_match(row) for row in rows]

    def _insert_fixtures(
        self, conn: sqlite3.Connection, league_id: uuid.UUID, teams: List[Team]
    ) -> List[Match]:
        fixtures = generate_fixtures([str(team.id) for team in teams])
        matches = [
            Match(
                id=uuid.uuid4(),
                league_id=league_id,
                home_team_id=_as_uuid(fixture.home_team_id),
                away_team_id=_as_uuid(fixture.away_team_id),
                round=fixture.round,
            )
            for fixture in fixtures
        ]
        conn.executemany(
            """
            INSERT INTO matches (id, league_id, home_team_id, away_team_id, round, status)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    str(match.id),
                    str(match.league_id),
                    str(match.home_team_id),
                    str(match.away_team_id),
                    match.round,
                    match.status.value,
                )
                for match in matches
            ],
        )
        logger.info("Generated %d fixtures for league %s", len(matches), league_id)
        return matches


__all__ = ["LeagueRepository"]
