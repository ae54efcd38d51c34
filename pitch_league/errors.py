"""Exceptions raised by the league workflow."""

from __future__ import annotations

from typing import Optional


class LeagueError(Exception):
    """Base class carrying a machine-readable ``code`` alongside the message."""

    code = "LEAGUE_ERROR"

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class NotFoundError(LeagueError):
    code = "NOT_FOUND"


class LeagueStateError(LeagueError):
    """The league is in the wrong lifecycle status for the operation."""

    code = "LEAGUE_LOCKED"


class InsufficientTeamsError(LeagueError):
    code = "INSUFFICIENT_TEAMS"


class ConflictError(LeagueError):
    code = "CONFLICT"


class InvalidResultError(LeagueError):
    code = "VALIDATION_ERROR"


__all__ = [
    "ConflictError",
    "InsufficientTeamsError",
    "InvalidResultError",
    "LeagueError",
    "LeagueStateError",
    "NotFoundError",
]
