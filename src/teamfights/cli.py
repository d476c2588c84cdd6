"""
Run one tick of the team battle batch scheduler.

Meant to be invoked periodically (cron, CI schedule, systemd timer). Each run
creates at most one batch of team battles and exits.

Usage:
  OAUTH_TOKEN=... teamfights --state-file config/batch-tournament.state.json

  # Rehearse without contacting the server
  DRY_RUN=1 teamfights

  # Show persisted progress and what the next run would do
  teamfights --status

Exit codes: 0 on success or when nothing is due, 1 when any battle in the
executed batch failed or on a fatal error.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from typing import Optional, Sequence

from teamfights import __version__
from teamfights.client.api import TeamBattleClient
from teamfights.core.config import load_config, read_oauth_token
from teamfights.core.constants import DEFAULT_STATE_FILE
from teamfights.core.exceptions import TeamfightsError
from teamfights.core.logging import setup_logging
from teamfights.core.sentry import init_sentry, tag_battle_config
from teamfights.cycle.machine import CycleStateMachine, TickResult
from teamfights.cycle.state import CycleStateStore

logger = logging.getLogger("teamfights.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="teamfights",
        description="Create the weekly LMAO team battles in four timed batches.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--state-file",
        default=DEFAULT_STATE_FILE,
        help=f"JSON file holding cycle progress (default: {DEFAULT_STATE_FILE})",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional YAML file overriding battle settings",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log intended creations without contacting the server",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show cycle progress and the next action, then exit",
    )
    parser.add_argument(
        "--log-file", default=None, help="Also write logs to this file"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _print_status(result: TickResult) -> None:
    state = result.state
    print("\n=== Team Battle Cycle Status ===")
    print(f"Last completed day: {state.last_completed_sequence_number}")
    print(f"Cycle active: {state.is_cycle_active}")
    print(f"Current batch: {state.current_batch_index}")
    if state.cycle_start_timestamp:
        print(f"Cycle started: {state.cycle_start_timestamp.isoformat()}")
    if state.last_cycle_completion_timestamp:
        print(
            "Last cycle completed: "
            f"{state.last_cycle_completion_timestamp.isoformat()}"
        )
    print(f"Next action: {result.action.value}")
    if result.next_batch_at:
        print(f"Next batch due: {result.next_batch_at.isoformat()}")
    if result.next_cycle_at:
        print(f"Next cycle due: {result.next_cycle_at.isoformat()}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file,
    )
    sentry_enabled = init_sentry(context="teamfights_tick", release=__version__)

    store = CycleStateStore(args.state_file)

    try:
        if args.status:
            config = load_config(args.config)
            machine = CycleStateMachine(store, TeamBattleClient(config, token=""))
            _print_status(machine.peek())
            return 0

        token = read_oauth_token()
        config = load_config(args.config)
        if args.dry_run and not config.dry_run:
            config = replace(config, dry_run=True)
        if config.dry_run:
            logger.info("Dry run enabled: no tournaments will be created")
        if sentry_enabled:
            tag_battle_config(config)

        client = TeamBattleClient(config, token)
        result = CycleStateMachine(store, client).tick()
    except TeamfightsError as e:
        logger.error(f"Fatal error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
