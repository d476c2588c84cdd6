"""Remote team battle creation."""

from teamfights.client.api import (
    BatchOutcome,
    CreationResult,
    TeamBattleClient,
    build_tournament_form,
    is_valid_token,
    validate_token,
)

__all__ = [
    "TeamBattleClient",
    "CreationResult",
    "BatchOutcome",
    "build_tournament_form",
    "is_valid_token",
    "validate_token",
]
