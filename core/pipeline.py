"""
Fetch -> extract -> normalize -> assemble, shared by the three entry points.

    collect_snapshot_rows   bulk snapshot over all active tennis competitions
    fetch_competition       single competition, optional name filter
    scan_event_counts       event counts per (competition, region) pair

The failure policy is always an explicit argument.
"""
import re
from typing import Iterable, List, Optional, Pattern, Tuple

from clients.odds_api import OddsApiClient
from core.assembler import event_record, normalize_market, snapshot_row
from core.errors import ConfigError
from core.extractor import MarketSelector, extract_markets, first_h2h_bookmaker
from core.models import (
    CollectionReport,
    CompetitionDescriptor,
    FailurePolicy,
    NormalizedRow,
    ScanHistoryRow,
)
from core.normalizer import fold_name
from core.throttle import Throttle
from utils.logger import get_logger

logger = get_logger(__name__)

FAILED_COUNT = -1


def _merge_drops(report: CollectionReport, dropped: dict):
    for reason, count in dropped.items():
        report.dropped[reason] = report.dropped.get(reason, 0) + count


def fetch_normalized(client: OddsApiClient, competition_key: str, region: str,
                     policy: FailurePolicy, report: CollectionReport,
                     selector: MarketSelector = first_h2h_bookmaker) -> List[NormalizedRow]:
    """Fetch one competition/region and return its normalized rows."""
    result = client.fetch_markets(competition_key, region, policy)
    if result.failed:
        report.failed.append((competition_key, region))
        return []

    markets, dropped = extract_markets(result.events, selector)
    _merge_drops(report, dropped)
    if dropped:
        logger.info(f"{competition_key}: kept {len(markets)} events, dropped {sum(dropped.values())} {dropped}")

    return [normalize_market(m) for m in markets]


def collect_snapshot_rows(client: OddsApiClient, competitions: Iterable[CompetitionDescriptor],
                          region: str, throttle: Throttle,
                          policy: FailurePolicy = FailurePolicy.LENIENT,
                          selector: MarketSelector = first_h2h_bookmaker) -> CollectionReport:
    """
    Collect flat snapshot rows for every competition, one region.

    Returns:
        CollectionReport with rows in competition order
    """
    report = CollectionReport()
    for competition in competitions:
        throttle.wait()
        rows = fetch_normalized(client, competition.key, region, policy, report, selector)
        report.rows.extend(snapshot_row(r, competition.key, region) for r in rows)
        logger.debug(f"{competition.key}: {len(rows)} rows")

    logger.info(
        f"Collected {len(report.rows)} rows, dropped {report.dropped_total} events, "
        f"{len(report.failed)} failed fetches"
    )
    return report


def compile_include(pattern: Optional[str]) -> Optional[Pattern]:
    if not pattern:
        return None
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise ConfigError(f"Invalid --include pattern {pattern!r}: {e}") from e


def matches_include(record: dict, include: Optional[Pattern]) -> bool:
    """Search the pattern in the space-joined player names, raw or ASCII-folded."""
    if include is None:
        return True
    names = " ".join(record.get("players") or [])
    return bool(include.search(names) or include.search(fold_name(names)))


def fetch_competition(client: OddsApiClient, competition_key: str, region: str,
                      include: Optional[str] = None,
                      policy: FailurePolicy = FailurePolicy.STRICT,
                      selector: MarketSelector = first_h2h_bookmaker) -> Tuple[List[dict], CollectionReport]:
    """
    Fetch one competition and build its nested event records.

    Returns:
        Tuple of (event records matching the include filter, report)
    """
    pattern = compile_include(include)
    report = CollectionReport()

    rows = fetch_normalized(client, competition_key, region, policy, report, selector)
    records = [event_record(r) for r in rows]
    filtered = [r for r in records if matches_include(r, pattern)]
    if pattern is not None:
        logger.info(f"Filter {include!r} kept {len(filtered)}/{len(records)} events")

    report.rows.extend(filtered)
    return filtered, report


def scan_event_counts(client: OddsApiClient, competitions: Iterable[CompetitionDescriptor],
                      regions: List[str], throttle: Throttle, timestamp: str) -> List[ScanHistoryRow]:
    """
    Count upstream events for each (competition, region) pair.

    A failed fetch is recorded with count -1 instead of being skipped.
    """
    rows: List[ScanHistoryRow] = []
    for competition in competitions:
        for region in regions:
            throttle.wait()
            result = client.fetch_markets(competition.key, region, FailurePolicy.LENIENT)
            count = FAILED_COUNT if result.failed else len(result.events)
            rows.append(ScanHistoryRow(
                timestamp=timestamp,
                key=competition.key,
                title=competition.title,
                region=region,
                count=count,
            ))
    return rows
