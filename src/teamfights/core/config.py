"""Configuration for team battle creation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Mapping, Optional

import yaml

from teamfights.core.constants import (
    DEFAULT_CLOCK_INCREMENT,
    DEFAULT_CLOCK_TIME,
    DEFAULT_HOST_TEAM_ID,
    DEFAULT_MINUTES,
    DEFAULT_NB_LEADERS,
    DEFAULT_RATED,
    DEFAULT_SERVER,
    DEFAULT_TEAMS,
    DEFAULT_VARIANT,
    DRY_RUN_ENV,
    TOKEN_ENV,
    TRUTHY_VALUES,
)
from teamfights.core.exceptions import ConfigError, MissingCredential


@dataclass(frozen=True)
class BattleConfig:
    """Settings shared by every team battle the scheduler creates."""

    server: str = DEFAULT_SERVER
    host_team_id: str = DEFAULT_HOST_TEAM_ID

    # Clock and duration
    minutes: int = DEFAULT_MINUTES
    clock_time: int = DEFAULT_CLOCK_TIME
    clock_increment: int = DEFAULT_CLOCK_INCREMENT

    rated: bool = DEFAULT_RATED
    variant: str = DEFAULT_VARIANT

    # Teams invited to the battle (the host is filtered out at request time)
    teams: tuple[str, ...] = field(default=DEFAULT_TEAMS)
    nb_leaders: int = DEFAULT_NB_LEADERS

    # Simulate creation without contacting the server
    dry_run: bool = False

    @property
    def invited_teams(self) -> list[str]:
        """Teams to invite, excluding blanks and the host itself."""
        return [t for t in self.teams if t and t != self.host_team_id]


_FIELD_TYPES = {
    "server": str,
    "host_team_id": str,
    "variant": str,
    "minutes": int,
    "clock_time": int,
    "clock_increment": int,
    "nb_leaders": int,
    "rated": bool,
    "dry_run": bool,
}


def _check_type(key: str, value: object) -> None:
    expected = _FIELD_TYPES[key]
    # bool is an int subclass; `minutes: true` must not pass as 1
    if isinstance(value, bool) and expected is not bool:
        ok = False
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise ConfigError(
            f"'{key}' must be {expected.__name__}, got {type(value).__name__} {value!r}"
        )


def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY_VALUES


def _read_yaml(path: Path) -> dict:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(
    path: str | Path | None = None,
    env: Optional[Mapping[str, str]] = None,
) -> BattleConfig:
    """Build a BattleConfig from defaults, an optional YAML file and env.

    Later sources override earlier ones. The only environment override is
    ``DRY_RUN``, which can switch dry-run mode on but never off.
    """
    env = os.environ if env is None else env
    config = BattleConfig()

    if path is not None:
        overrides = _read_yaml(Path(path))
        known = {f.name for f in fields(BattleConfig)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        if "teams" in overrides:
            teams = overrides["teams"]
            if isinstance(teams, str) or not isinstance(teams, (list, tuple)):
                raise ConfigError("'teams' must be a list of team ids")
            overrides["teams"] = tuple(str(t) for t in teams)
        for key, value in overrides.items():
            if key != "teams":
                _check_type(key, value)
        config = replace(config, **overrides)

    if _truthy(env.get(DRY_RUN_ENV)):
        config = replace(config, dry_run=True)

    return config


def read_oauth_token(env: Optional[Mapping[str, str]] = None) -> str:
    """Return the OAuth token from the environment or raise MissingCredential."""
    env = os.environ if env is None else env
    token = env.get(TOKEN_ENV)
    if not token:
        raise MissingCredential(
            f"{TOKEN_ENV} environment variable is required"
        )
    return token
