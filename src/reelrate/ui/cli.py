# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from reelrate.app import resolve_ratings, season_ratings
from reelrate.config import configure_logging
from reelrate.domain.errors import InvalidBatchError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve OMDb ratings for scraped titles")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Resolve a batch of titles")
    resolve.add_argument(
        "--input",
        type=Path,
        help="JSON batch file (reads stdin when omitted)",
    )

    episodes = subparsers.add_parser("episodes", help="Ratings for one season of a series")
    episodes.add_argument(
        "--series-id",
        type=str,
        required=True,
        help="IMDb id of the series, e.g. tt0903747",
    )
    episodes.add_argument(
        "--season",
        type=int,
        required=True,
        help="Season number (1-based)",
    )

    return parser.parse_args(list(argv))


def _read_batch(path: Path | None) -> object:
    try:
        raw = path.read_text(encoding="utf-8") if path is not None else sys.stdin.read()
    except OSError as exc:
        raise InvalidBatchError(f"Cannot read batch input: {exc}") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidBatchError(f"Batch input is not valid JSON: {exc.msg}") from exc


def _emit(document: object) -> None:
    print(json.dumps(document, ensure_ascii=False, indent=2))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "resolve":
            payload = _read_batch(parsed_args.input)
            outcome = resolve_ratings(payload)
            _emit(outcome.to_wire())
            if outcome.store_error is not None:
                log.warning("Results were not persisted: %s", outcome.store_error)
        elif parsed_args.command == "episodes":
            if parsed_args.season < 1:
                raise ValueError("Season must be 1 or greater")  # noqa: TRY301
            ratings = season_ratings(parsed_args.series_id, parsed_args.season)
            _emit(ratings.to_wire())
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ValueError as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Fatal error while resolving ratings")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
