"""Environment-driven settings for the API, CLI and notification gateways."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Mapping, Optional

from golfleague.models import SwapMode


logger = logging.getLogger(__name__)

ENV_PREFIX = "GOLFLEAGUE_"
DEFAULT_DB_PATH = Path("golfleague.sqlite")
DEFAULT_SMTP_PORT = 587


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _env_int(environ: Mapping[str, str], name: str, default: int, *, min_value: int | None = None) -> int:
    raw = _env(environ, name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s%s: %s; using default %d", ENV_PREFIX, name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = _env(environ, name)
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    logger.warning("Invalid boolean for %s%s: %s; using default %s", ENV_PREFIX, name, raw, default)
    return default


def _env_swap_mode(environ: Mapping[str, str], default: SwapMode) -> SwapMode:
    raw = _env(environ, "SWAP_MODE")
    if raw is None:
        return default
    try:
        return SwapMode(raw.upper())
    except ValueError:
        logger.warning("Invalid swap mode %s; using default %s", raw, default.value)
        return default


@dataclass(frozen=True)
class LeagueSettings:
    db_path: Path = DEFAULT_DB_PATH
    swap_mode: SwapMode = SwapMode.REPOINT
    notify_rejections: bool = False
    api_tokens: FrozenSet[str] = field(default_factory=frozenset)
    log_level: str = "INFO"
    email_from: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_from_number: Optional[str] = None

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.email_from)

    @property
    def sms_enabled(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_from_number)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LeagueSettings":
        env = os.environ if environ is None else environ
        db_path = _env(env, "DB_PATH")
        tokens = _env(env, "API_TOKENS") or ""
        return cls(
            db_path=Path(db_path) if db_path else DEFAULT_DB_PATH,
            swap_mode=_env_swap_mode(env, SwapMode.REPOINT),
            notify_rejections=_env_bool(env, "NOTIFY_REJECTIONS", False),
            api_tokens=frozenset(token.strip() for token in tokens.split(",") if token.strip()),
            log_level=(_env(env, "LOG_LEVEL") or "INFO").upper(),
            email_from=_env(env, "EMAIL_FROM"),
            smtp_host=_env(env, "SMTP_HOST"),
            smtp_port=_env_int(env, "SMTP_PORT", DEFAULT_SMTP_PORT, min_value=1),
            smtp_username=_env(env, "SMTP_USERNAME"),
            smtp_password=_env(env, "SMTP_PASSWORD"),
            twilio_account_sid=_env(env, "TWILIO_ACCOUNT_SID"),
            twilio_auth_token=_env(env, "TWILIO_AUTH_TOKEN"),
            twilio_from_number=_env(env, "TWILIO_FROM_NUMBER"),
        )
