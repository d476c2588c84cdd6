"""
HTTP client for creating team battles on the remote arena service.

Each slot becomes one ``POST /api/tournament`` request. Failures are caught
per slot and reported as ``CreationResult`` values so a batch keeps going
after one bad request; the batch runner spaces requests out with a fixed
pacing delay to stay inside the service's rate limits.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import requests

from teamfights import __version__
from teamfights.core.config import BattleConfig
from teamfights.core.constants import (
    DEFAULT_TIMEOUT,
    PACING_SECONDS,
    TOURNAMENT_API_PATH,
)
from teamfights.core.exceptions import (
    InvalidCredential,
    NetworkError,
    RemoteRequestFailed,
    TeamfightsError,
)
from teamfights.schedule.generator import TournamentSlot

logger = logging.getLogger(__name__)

USER_AGENT = f"LMAO-Teamfights-Creator/{__version__}"

_TOKEN_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_PLACEHOLDER_MARKERS = ("***", "YOUR_TOKEN", "PLACEHOLDER")
_MIN_TOKEN_LENGTH = 11


def is_valid_token(token: Optional[str]) -> bool:
    """Check that `token` looks like a real OAuth token."""
    if not token or token.strip() == "":
        return False
    if any(marker in token for marker in _PLACEHOLDER_MARKERS):
        return False
    return bool(_TOKEN_RE.match(token)) and len(token) >= _MIN_TOKEN_LENGTH


def validate_token(token: Optional[str]) -> str:
    """Return `token` unchanged or raise InvalidCredential."""
    if not is_valid_token(token):
        raise InvalidCredential(
            "Invalid or missing OAuth token. Please set a valid OAUTH_TOKEN "
            "environment variable."
        )
    return token


def build_tournament_form(
    slot: TournamentSlot, config: BattleConfig
) -> list[tuple[str, str]]:
    """Build the form body for creating `slot` as a team battle."""
    form = [
        ("name", slot.display_name),
        ("description", slot.description),
        ("clockTime", str(config.clock_time)),
        ("clockIncrement", str(config.clock_increment)),
        ("minutes", str(config.minutes)),
        ("rated", "true" if config.rated else "false"),
        ("variant", config.variant),
        ("startDate", slot.start_iso),
        ("teamBattleByTeam", config.host_team_id),
        ("nbLeaders", str(config.nb_leaders)),
    ]
    form.extend(("teams[]", team) for team in config.invited_teams)
    return form


def _redact(token: str) -> str:
    return f"{token[:10]}..."


@dataclass
class CreationResult:
    """Outcome of creating one slot."""

    slot: TournamentSlot
    ok: bool
    url: Optional[str] = None
    error: Optional[TeamfightsError] = None


@dataclass
class BatchOutcome:
    """Aggregated results of one batch invocation."""

    results: List[CreationResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    def add(self, result: CreationResult) -> None:
        self.results.append(result)


class TeamBattleClient:
    """
    Creates team battles one slot at a time.

    Args:
        config: Battle settings shared by every slot
        token: OAuth bearer token
        session: Requests session for HTTP operations
        sleep: Delay function used for pacing (injectable for tests)
        pacing_seconds: Delay between successive creations in a batch
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        config: BattleConfig,
        token: str,
        session: requests.Session | None = None,
        sleep: Optional[Callable[[float], None]] = None,
        pacing_seconds: float = PACING_SECONDS,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.config = config
        self.token = token
        self.session = session or requests.Session()
        self.sleep = sleep or time.sleep
        self.pacing_seconds = pacing_seconds
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.config.server.rstrip('/')}{TOURNAMENT_API_PATH}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _result_url(self, response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("id"):
            return f"{self.config.server}/tournament/{data['id']}"
        return response.headers.get("Location") or "unknown"

    def _post(self, slot: TournamentSlot) -> str:
        validate_token(self.token)
        form = build_tournament_form(slot, self.config)

        if self.config.dry_run:
            logger.info(f"[DRY RUN] Would create: {slot.display_name}")
            logger.info(f"[DRY RUN] Start: {slot.start_iso}")
            logger.info(
                f"[DRY RUN] Teams: {', '.join(self.config.invited_teams)}"
            )
            return f"{self.config.server}/team/{self.config.host_team_id}/arena/pending"

        logger.debug(
            "POST %s team=%s auth=Bearer %s",
            self.endpoint,
            self.config.host_team_id,
            _redact(self.token),
        )
        try:
            response = self.session.post(
                self.endpoint,
                data=form,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(e) from e

        if not response.ok:
            raise RemoteRequestFailed(response.status_code, response.text)

        return self._result_url(response)

    def create(self, slot: TournamentSlot) -> CreationResult:
        """Create one team battle and report the outcome without raising."""
        try:
            url = self._post(slot)
        except TeamfightsError as e:
            logger.error(
                f"Failed to create {slot.kind.label} battle "
                f"{slot.sequence_number}: {e}"
            )
            return CreationResult(slot=slot, ok=False, error=e)

        logger.info(f"Created tournament: {url}")
        return CreationResult(slot=slot, ok=True, url=url)

    def create_batch(self, slots: Sequence[TournamentSlot]) -> BatchOutcome:
        """Create `slots` in order, pausing between successive requests."""
        outcome = BatchOutcome()
        logger.info(f"=== Creating Batch of {len(slots)} Tournaments ===")

        for i, slot in enumerate(slots):
            logger.info(
                f"--- Creating {slot.kind.label} Battle {slot.sequence_number} "
                f"--- name={slot.display_name!r} start={slot.start_iso}"
            )
            if i > 0:
                logger.info(
                    f"Waiting {self.pacing_seconds:g} seconds to avoid rate limits..."
                )
                self.sleep(self.pacing_seconds)

            outcome.add(self.create(slot))

        return outcome
