"""
Run one contribution speed recomputation pass from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from typing import Any

from app.config import get_speed_settings
from app.logging_utils import configure_logging
from app.services.contribution_store import DatabaseContributionStore
from app.services.speed_orchestrator import SpeedRunLoop
from app.validators.range_validator import InvalidRangeError
from db.repositories.errors import ContributionStoreError
from db.session import SessionLocal

logger = logging.getLogger(__name__)


def parse_range_arg(raw: str) -> dict[str, Any]:
    """
    Split ``name:YYYY-MM-DD:YYYY-MM-DD`` into a range payload.

    Date validation happens later, together with every other range.
    """
    parts = raw.split(":")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(
            f"expected name:start:end, got {raw!r}"
        )
    name, start, end = (part.strip() for part in parts)
    return {"name": name, "start": start, "end": end}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recompute contribution speed KPIs.")
    parser.add_argument(
        "--range",
        dest="ranges",
        action="append",
        type=parse_range_arg,
        default=None,
        help="Custom range as name:YYYY-MM-DD:YYYY-MM-DD. Repeatable; "
        "replaces SPEED_CUSTOM_RANGES when given.",
    )
    parser.add_argument(
        "--limit",
        dest="limit",
        type=int,
        default=None,
        help="Process at most this many flagged profiles.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        settings = get_speed_settings()
    except InvalidRangeError as exc:
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 2

    with SessionLocal() as db:
        store = DatabaseContributionStore(
            db,
            lookback_days=settings.lookback_days,
            profile_limit=args.limit,
        )
        loop = SpeedRunLoop(store)
        try:
            loop.set_custom_ranges(args.ranges if args.ranges is not None else settings.custom_ranges)
        except InvalidRangeError as exc:
            print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
            return 2

        def _handle_signal(signum: int, frame: Any) -> None:
            logger.info("Received signal %d, finishing current profile", signum)
            loop.request_stop()

        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)

        try:
            summary = loop.run()
        except ContributionStoreError as exc:
            logger.error("Speed run aborted: %s", exc)
            return 1

    print(json.dumps(summary.as_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
