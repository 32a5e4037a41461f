"""
Append a one-line summary per active tennis tournament and region to
scan_history.csv. A failed request is logged with count -1.
"""
import argparse
import sys
from pathlib import Path

from clients.odds_api import OddsApiClient
from config.settings import Settings, load_settings
from core.errors import OddsPipelineError
from core.history import append_history
from core.pipeline import scan_event_counts
from core.throttle import Throttle
from utils.clock import iso_timestamp, utc_now
from utils.logger import get_logger

logger = get_logger(__name__)


def run_scan(settings: Settings, client: OddsApiClient = None, throttle: Throttle = None,
             history_file: Path = None):
    """
    Run the event-count scan and append its rows.

    Returns:
        List of ScanHistoryRow appended
    """
    timestamp = iso_timestamp(utc_now())
    client = client or OddsApiClient(settings)
    throttle = throttle or Throttle(settings.SCAN_THROTTLE_SECONDS)
    history_file = Path(history_file or settings.HISTORY_FILE)

    competitions = client.list_active_tennis_competitions()
    regions = settings.region_list
    logger.info(f"Scanning {len(competitions)} competitions across regions {regions}")

    rows = scan_event_counts(client, competitions, regions, throttle, timestamp)
    failed = sum(1 for r in rows if r.count < 0)
    if failed:
        logger.warning(f"{failed}/{len(rows)} fetches failed and were logged with count -1")

    append_history(rows, history_file, settings.HISTORY_QUOTING)
    return rows


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Log tennis event counts per tournament and region")
    parser.add_argument("--history-file", help="CSV to append to (default: HISTORY_FILE)")
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        run_scan(settings, history_file=args.history_file)
    except OddsPipelineError as e:
        logger.error(f"ERROR: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
