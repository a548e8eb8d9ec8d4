from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    # One of these must be set; the remote check wins when both are.
    operator_secret: str | None
    operator_auth_url: str | None = None

    # Where the whole availability state is stored (":memory:" keeps it in-process)
    state_file: str = "state.json"

    # How many days, starting today, are offered for booking
    days_ahead: int = 7

    # Remote operator check tuning
    auth_timeout_seconds: float = 10.0
    auth_retry_attempts: int = 2


def _optional(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _int_env(name: str, default: str, *, minimum: int) -> int:
    raw = os.getenv(name, default).strip()
    try:
        value = int(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid {name} value: {raw!r}. Expected an integer.") from e
    if value < minimum:
        raise RuntimeError(f"{name} must be >= {minimum}")
    return value


def load_settings(dotenv_path: str | None = None) -> Settings:
    # Prefer .env in repo root; dotenv_path allows overriding in tests.
    load_dotenv(dotenv_path=dotenv_path, override=False)

    operator_secret = _optional("OPERATOR_SECRET")
    operator_auth_url = _optional("OPERATOR_AUTH_URL")
    if operator_secret is None and operator_auth_url is None:
        raise RuntimeError("Missing required environment variable: OPERATOR_SECRET (or OPERATOR_AUTH_URL)")

    days_ahead = _int_env("DAYS_AHEAD", "7", minimum=1)
    auth_retry_attempts = _int_env("AUTH_RETRY_ATTEMPTS", "2", minimum=1)

    auth_timeout_raw = os.getenv("AUTH_TIMEOUT_SECONDS", "10").strip()
    try:
        auth_timeout_seconds = float(auth_timeout_raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid AUTH_TIMEOUT_SECONDS value: {auth_timeout_raw!r}") from e
    if auth_timeout_seconds <= 0:
        raise RuntimeError("AUTH_TIMEOUT_SECONDS must be > 0")

    return Settings(
        operator_secret=operator_secret,
        operator_auth_url=operator_auth_url,
        state_file=os.getenv("STATE_FILE", "state.json"),
        days_ahead=days_ahead,
        auth_timeout_seconds=auth_timeout_seconds,
        auth_retry_attempts=auth_retry_attempts,
    )
