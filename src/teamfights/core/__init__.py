"""Shared configuration, constants and errors."""

from teamfights.core.config import BattleConfig, load_config, read_oauth_token
from teamfights.core.exceptions import (
    ConfigError,
    InvalidBatchIndex,
    InvalidCredential,
    MissingCredential,
    NetworkError,
    RemoteRequestFailed,
    StateStoreUnreadable,
    TeamfightsError,
)

__all__ = [
    "BattleConfig",
    "load_config",
    "read_oauth_token",
    "TeamfightsError",
    "ConfigError",
    "MissingCredential",
    "InvalidCredential",
    "NetworkError",
    "RemoteRequestFailed",
    "InvalidBatchIndex",
    "StateStoreUnreadable",
]
