"""
Single-tournament odds tool.

Commands:
    python odds_cli.py sports
    python odds_cli.py fetch <sport_key> [--include "A|B"] [--csv] [--region eu|uk|us|au]

fetch writes odds_<sport_key>.json (and odds_<sport_key>.csv with --csv).
Any failed request aborts the command.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from clients.odds_api import OddsApiClient
from config.settings import Settings, load_settings
from core.assembler import competition_csv_row
from core.errors import OddsPipelineError
from core.models import FailurePolicy
from core.pipeline import fetch_competition
from core.snapshot import write_competition_snapshot
from utils.clock import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)

REGIONS = ["eu", "uk", "us", "au"]


def list_sports(settings: Settings, client: OddsApiClient = None) -> List[str]:
    """Print every tennis competition in the catalog, active or not."""
    client = client or OddsApiClient(settings)
    competitions = client.list_tennis_competitions()

    lines = [f"- {c.key}  |  {c.title}  |  active={c.active}" for c in competitions]
    print("Tennis sport keys:\n")
    for line in lines:
        print(line)
    return lines


def fetch_odds(settings: Settings, sport_key: str, include: Optional[str] = None,
               write_csv: bool = False, region: Optional[str] = None,
               client: OddsApiClient = None, out_dir: Path = None) -> List[dict]:
    """
    Fetch one competition and write its JSON (and optional CSV) snapshot.

    Returns:
        The event records that were written
    """
    client = client or OddsApiClient(settings)
    region = region or settings.region
    out_dir = Path(out_dir or settings.OUTPUT_DIR)
    fetched_at = utc_now()

    events, _ = fetch_competition(client, sport_key, region, include, FailurePolicy.STRICT)

    csv_rows = [competition_csv_row(e, region) for e in events] if write_csv else None
    write_competition_snapshot(sport_key, region, include, fetched_at, events, out_dir, csv_rows)

    if events:
        logger.info(f"Sample: {json.dumps(events[0], ensure_ascii=False)}")
    return events


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tennis head-to-head odds from The Odds API")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("sports", help="list tennis sport keys")

    fetch = subparsers.add_parser("fetch", help="fetch odds for one sport key")
    fetch.add_argument("sport_key")
    fetch.add_argument("--include", help="case-insensitive regex matched against player names")
    fetch.add_argument("--csv", action="store_true", help="also write a CSV file")
    fetch.add_argument("--region", choices=REGIONS, help="bookmaker region (default: REGION)")
    fetch.add_argument("--out-dir", help="output directory (default: OUTPUT_DIR)")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings()
        if args.command == "sports":
            list_sports(settings)
        elif args.command == "fetch":
            fetch_odds(
                settings,
                args.sport_key,
                include=args.include,
                write_csv=args.csv,
                region=args.region,
                out_dir=args.out_dir,
            )
    except OddsPipelineError as e:
        logger.error(f"ERROR: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
