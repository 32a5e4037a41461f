"""
Fetch odds for all active tennis tournaments (single region) and write a merged
snapshot: data/odds_latest.{csv,json} plus a timestamped CSV archive.

A tournament whose odds request fails contributes no rows; the run goes on.
"""
import argparse
import sys
from pathlib import Path

from clients.odds_api import OddsApiClient
from config.settings import Settings, load_settings
from core.errors import OddsPipelineError
from core.models import FailurePolicy
from core.pipeline import collect_snapshot_rows
from core.snapshot import write_archive, write_latest
from core.throttle import Throttle
from utils.clock import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)


def run_snapshot(settings: Settings, client: OddsApiClient = None, throttle: Throttle = None,
                 out_dir: Path = None, archive: bool = True):
    """
    Run the bulk snapshot job.

    Returns:
        CollectionReport of the run
    """
    fetched_at = utc_now()
    client = client or OddsApiClient(settings)
    throttle = throttle or Throttle(settings.SNAPSHOT_THROTTLE_SECONDS)
    out_dir = Path(out_dir or settings.DATA_DIR)
    region = settings.region

    competitions = client.list_active_tennis_competitions()
    logger.info(f"Found {len(competitions)} active tennis competitions")

    report = collect_snapshot_rows(client, competitions, region, throttle, FailurePolicy.LENIENT)
    if report.failed:
        logger.warning(f"Odds unavailable for: {', '.join(key for key, _ in report.failed)}")

    csv_text = write_latest(report.rows, fetched_at, region, out_dir)
    if archive:
        write_archive(csv_text, fetched_at, out_dir)

    return report


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Merged odds snapshot for all active tennis tournaments")
    parser.add_argument("--out-dir", help="snapshot directory (default: DATA_DIR)")
    parser.add_argument("--no-archive", action="store_true", help="skip the timestamped archive copy")
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        run_snapshot(settings, out_dir=args.out_dir, archive=not args.no_archive)
    except OddsPipelineError as e:
        logger.error(f"ERROR: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
