"""Error taxonomy shared by the store, swap and API layers."""

from __future__ import annotations

from typing import Any, Mapping


class LeagueError(Exception):
    """Base class for failures surfaced to API and CLI callers."""


class ValidationError(LeagueError):
    """Missing or invalid caller input."""


class NotFoundError(LeagueError):
    """A referenced swap request, player or schedule entry does not exist."""


class InvalidStateError(LeagueError):
    """The swap request is not in the state the operation requires."""


class ConflictError(LeagueError):
    """The write would clobber or orphan existing state."""


class DependencyFailure(LeagueError):
    """A store or notification call failed.

    ``partial`` is set when earlier writes of the same operation already
    committed, so the caller or an operator has to reconcile.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        context: Mapping[str, Any] | None = None,
        partial: bool = False,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.context = dict(context or {})
        self.partial = partial


__all__ = [
    "LeagueError",
    "ValidationError",
    "NotFoundError",
    "InvalidStateError",
    "ConflictError",
    "DependencyFailure",
]
