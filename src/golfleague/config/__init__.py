"""Configuration helpers for the league service."""

from .settings import DEFAULT_DB_PATH, LeagueSettings

__all__ = [
    "DEFAULT_DB_PATH",
    "LeagueSettings",
]
