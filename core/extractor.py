from typing import Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from core.errors import DataShapeError
from core.models import Bookmaker, ExtractedMarket, ExtractionResult, Market, RawMarketEvent
from utils.logger import get_logger

logger = get_logger(__name__)

H2H = "h2h"

NO_H2H_MARKET = "no_h2h_market"
TOO_FEW_OUTCOMES = "too_few_outcomes"
MALFORMED_EVENT = "malformed_event"

MarketSelector = Callable[[RawMarketEvent], Optional[Tuple[Bookmaker, Market]]]


def _h2h_market(bookmaker: Bookmaker) -> Optional[Market]:
    return next((m for m in bookmaker.markets if m.key == H2H), None)


def first_h2h_bookmaker(event: RawMarketEvent) -> Optional[Tuple[Bookmaker, Market]]:
    """
    Pick the first bookmaker, in payload order, that offers a head-to-head market.

    No price comparison and no recency weighting: whoever is listed first wins.
    """
    for bookmaker in event.bookmakers:
        market = _h2h_market(bookmaker)
        if market is not None:
            return bookmaker, market
    return None


def _build_market(event: RawMarketEvent, selector: MarketSelector) -> ExtractedMarket:
    selected = selector(event)
    if selected is None:
        raise DataShapeError(NO_H2H_MARKET, f"event {event.id}")

    bookmaker, market = selected
    priced = [o for o in market.outcomes if o.price is not None]
    if len(priced) < 2:
        raise DataShapeError(TOO_FEW_OUTCOMES, f"event {event.id} has {len(priced)} priced outcome(s)")

    return ExtractedMarket(
        event_id=event.id,
        start=event.commence_time,
        outcome_names=[o.name or "" for o in priced],
        decimal_odds=[o.price for o in priced],
        bookmaker=bookmaker.label,
    )


def extract_market(event: RawMarketEvent, selector: MarketSelector = first_h2h_bookmaker) -> ExtractionResult:
    """
    Extract outcome names and prices from one event.

    Args:
        event: Parsed upstream event
        selector: Strategy choosing the (bookmaker, market) pair to read

    Returns:
        ExtractionResult with either the market or the reason it was dropped
    """
    try:
        market = _build_market(event, selector)
    except DataShapeError as e:
        logger.debug(f"Dropped event: {e}")
        return ExtractionResult(event_id=event.id, drop_reason=e.reason)
    return ExtractionResult(event_id=event.id, market=market)


def parse_event(payload) -> RawMarketEvent:
    """Validate one raw payload item, raising DataShapeError if it is not an event."""
    if not isinstance(payload, dict):
        raise DataShapeError(MALFORMED_EVENT, f"expected an object, got {type(payload).__name__}")
    try:
        return RawMarketEvent.model_validate(payload)
    except ValidationError as e:
        raise DataShapeError(MALFORMED_EVENT, f"event {payload.get('id')}: {e.error_count()} error(s)")


def extract_markets(payloads: Iterable,
                    selector: MarketSelector = first_h2h_bookmaker) -> Tuple[List[ExtractedMarket], Dict[str, int]]:
    """
    Extract markets from a list of raw event payloads.

    Returns:
        Tuple of (kept markets in payload order, drop counts keyed by reason)
    """
    markets: List[ExtractedMarket] = []
    dropped: Dict[str, int] = {}

    for payload in payloads:
        try:
            event = parse_event(payload)
        except DataShapeError as e:
            logger.debug(f"Dropped event: {e}")
            dropped[e.reason] = dropped.get(e.reason, 0) + 1
            continue

        result = extract_market(event, selector)
        if result.kept:
            markets.append(result.market)
        else:
            dropped[result.drop_reason] = dropped.get(result.drop_reason, 0) + 1

    return markets, dropped
