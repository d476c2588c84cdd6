"""
Optional Sentry reporting for scheduler runs.

A run that fails to create battles logs at ERROR level; with Sentry enabled
those records become events, so a timer that keeps failing is noticed even
when nobody reads the job output.

Environment variables (all optional):
- SENTRY_DSN / TEAMFIGHTS_SENTRY_DSN: DSN, first non-empty one wins.
- SENTRY_ENV / ENV: environment name, default "development".
- SENTRY_TRACES_SAMPLE_RATE: float, clamped into [0, 1].
- SENTRY_DEBUG: truthy value enables SDK debug output.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional
from urllib.parse import urlparse

from teamfights.core.config import BattleConfig
from teamfights.core.constants import TRUTHY_VALUES

logger = logging.getLogger(__name__)

DEFAULT_DSN_ENVS = ("SENTRY_DSN", "TEAMFIGHTS_SENTRY_DSN")


def _parse_rate(raw: Optional[str], default: float) -> float:
    """Parse a sample rate, clamping it into [0, 1]."""
    if not raw:
        return default
    try:
        rate = float(raw)
    except ValueError:
        logger.debug("Invalid sample rate %r; using default=%s", raw, default)
        return default
    return min(max(rate, 0.0), 1.0)


@dataclass(frozen=True)
class SentrySettings:
    dsn: str
    environment: str = "development"
    traces_sample_rate: float = 0.0
    debug: bool = False


def sentry_settings_from_env(
    env: Optional[Mapping[str, str]] = None,
    dsn_envs: Iterable[str] = DEFAULT_DSN_ENVS,
) -> Optional[SentrySettings]:
    """Read Sentry settings from `env`; None when reporting is off."""
    env = os.environ if env is None else env
    dsn_envs = list(dsn_envs)
    dsn = next((env[name] for name in dsn_envs if env.get(name)), None)
    if dsn is None:
        logger.info("Sentry disabled: no DSN in %s", dsn_envs)
        return None

    # CI secret stores keep surrounding quotes
    dsn = dsn.strip().strip("\"'")
    parsed = urlparse(dsn)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        logger.info("Sentry disabled: DSN is not an http(s) URL")
        return None

    return SentrySettings(
        dsn=dsn,
        environment=env.get("SENTRY_ENV") or env.get("ENV") or "development",
        traces_sample_rate=_parse_rate(env.get("SENTRY_TRACES_SAMPLE_RATE"), 0.0),
        debug=env.get("SENTRY_DEBUG", "").lower() in TRUTHY_VALUES,
    )


def init_sentry(
    *,
    context: str,
    release: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    dsn_envs: Iterable[str] = DEFAULT_DSN_ENVS,
) -> bool:
    """Initialize Sentry when configured and return whether it did.

    Events are tagged with the run context; see `tag_battle_config` for the
    per-run battle tags.
    """
    settings = sentry_settings_from_env(env, dsn_envs)
    if settings is None:
        return False

    import sentry_sdk
    from sentry_sdk.integrations.logging import LoggingIntegration

    sentry_sdk.init(
        dsn=settings.dsn,
        environment=settings.environment,
        release=release,
        integrations=[
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
        ],
        traces_sample_rate=settings.traces_sample_rate,
        debug=settings.debug,
    )
    sentry_sdk.set_tag("service", context)
    logger.info(
        "Sentry initialized: context=%s env=%s", context, settings.environment
    )
    return True


def tag_battle_config(config: BattleConfig) -> None:
    """Tag later events with the host team and dry-run flag.

    Call only after `init_sentry` returned True; dry-run rehearsals can then
    be filtered out in the Sentry UI.
    """
    import sentry_sdk

    sentry_sdk.set_tag("host_team", config.host_team_id)
    sentry_sdk.set_tag("dry_run", str(config.dry_run).lower())
