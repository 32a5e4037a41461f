"""
Builds the persisted record shapes from extracted markets.

Three shapes exist:
    - snapshot row: flat row of the merged multi-tournament snapshot
    - event record: nested object of the per-competition JSON document
    - competition CSV row: flat row derived from an event record
"""
from typing import List, Optional

from core.models import ExtractedMarket, NormalizedRow
from core.normalizer import finite_or_none, format_probability, normalize_decimal_odds, overround
from utils.logger import get_logger

logger = get_logger(__name__)


def normalize_market(market: ExtractedMarket) -> NormalizedRow:
    """Attach de-vigged probabilities; non-finite values become None."""
    probabilities = normalize_decimal_odds(market.decimal_odds)
    logger.debug(f"Event {market.event_id}: overround {overround(market.decimal_odds):.4f} at {market.bookmaker}")
    return NormalizedRow(
        market=market,
        probabilities=[finite_or_none(p) for p in probabilities],
    )


def _at(values: List, index: int, default=""):
    if index < len(values) and values[index] is not None:
        return values[index]
    return default


def snapshot_row(row: NormalizedRow, competition_key: str, region: str) -> dict:
    market = row.market
    return {
        "event_id": market.event_id,
        "start": market.start,
        "player1": _at(market.outcome_names, 0),
        "player2": _at(market.outcome_names, 1),
        "odds1": _at(market.decimal_odds, 0),
        "odds2": _at(market.decimal_odds, 1),
        "prob1": format_probability(_at(row.probabilities, 0, None)),
        "prob2": format_probability(_at(row.probabilities, 1, None)),
        "bookmaker": market.bookmaker,
        "sport_key": competition_key,
        "region": region,
    }


def event_record(row: NormalizedRow) -> dict:
    market = row.market
    return {
        "id": market.event_id,
        "start": market.start,
        "players": list(market.outcome_names),
        "odds_decimal": list(market.decimal_odds),
        "probs_normalized": list(row.probabilities),
        "bookmaker": market.bookmaker,
    }


def competition_csv_row(record: dict, region: Optional[str]) -> dict:
    players = record.get("players") or []
    odds = record.get("odds_decimal") or []
    probs = record.get("probs_normalized") or []
    return {
        "id": record.get("id"),
        "start": record.get("start"),
        "player1": _at(players, 0),
        "player2": _at(players, 1),
        "odds1": _at(odds, 0),
        "odds2": _at(odds, 1),
        "prob1": format_probability(_at(probs, 0, None)),
        "prob2": format_probability(_at(probs, 1, None)),
        "bookmaker": record.get("bookmaker") or "",
        "region": region,
    }
