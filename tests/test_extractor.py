import pytest

from conftest import h2h_bookmaker, make_event
from core.errors import DataShapeError
from core.extractor import (
    MALFORMED_EVENT,
    NO_H2H_MARKET,
    TOO_FEW_OUTCOMES,
    extract_market,
    extract_markets,
    parse_event,
)
from core.models import ExtractedMarket, RawMarketEvent


def test_first_bookmaker_with_h2h_wins():
    """The first listed bookmaker with an h2h market is used, not the best price."""
    payload = make_event("e1", [
        {"key": "betfair_ex_eu", "title": "Betfair", "markets": [{"key": "spreads", "outcomes": []}]},
        h2h_bookmaker("Pinnacle", [("Carlos Alcaraz", 1.50), ("Jannik Sinner", 2.60)]),
        h2h_bookmaker("Unibet", [("Carlos Alcaraz", 1.70), ("Jannik Sinner", 2.90)]),
    ])

    result = extract_market(parse_event(payload))

    assert result.kept
    assert result.market.bookmaker == "Pinnacle"
    assert result.market.outcome_names == ["Carlos Alcaraz", "Jannik Sinner"]
    assert result.market.decimal_odds == [1.50, 2.60]
    assert result.market.start == "2025-09-01T18:00:00Z"


def test_bookmaker_label_falls_back_to_key():
    payload = make_event("e1", [{
        "key": "onexbet",
        "markets": [{"key": "h2h", "outcomes": [{"name": "A", "price": 1.9}, {"name": "B", "price": 1.9}]}],
    }])

    assert extract_market(parse_event(payload)).market.bookmaker == "onexbet"


def test_single_outcome_is_dropped():
    payload = make_event("e1", [h2h_bookmaker("Pinnacle", [("Carlos Alcaraz", 1.50)])])

    result = extract_market(parse_event(payload))

    assert not result.kept
    assert result.drop_reason == TOO_FEW_OUTCOMES


def test_unpriced_outcomes_do_not_count():
    payload = make_event("e1", [h2h_bookmaker("Pinnacle", [("A", 1.50), ("B", None)])])

    assert extract_market(parse_event(payload)).drop_reason == TOO_FEW_OUTCOMES


def test_no_h2h_market_is_dropped():
    payload = make_event("e1", [
        {"key": "pinnacle", "title": "Pinnacle", "markets": [{"key": "totals", "outcomes": [
            {"name": "Over", "price": 1.9}, {"name": "Under", "price": 1.9},
        ]}]},
    ])

    result = extract_market(parse_event(payload))

    assert not result.kept
    assert result.drop_reason == NO_H2H_MARKET


def test_event_without_bookmakers_is_dropped():
    payload = {"id": "e1", "commence_time": "2025-09-01T18:00:00Z"}

    assert extract_market(parse_event(payload)).drop_reason == NO_H2H_MARKET


def test_parse_event_rejects_non_objects():
    with pytest.raises(DataShapeError) as exc:
        parse_event(["not", "an", "event"])
    assert exc.value.reason == MALFORMED_EVENT


def test_extract_markets_counts_drops_by_reason():
    payloads = [
        make_event("keep", [h2h_bookmaker("Pinnacle", [("A", 1.8), ("B", 2.2)])]),
        make_event("one", [h2h_bookmaker("Pinnacle", [("A", 1.8)])]),
        make_event("none", []),
        "garbage",
        make_event("keep2", [h2h_bookmaker("Unibet", [("C", 2.0), ("D", 2.0)])]),
    ]

    markets, dropped = extract_markets(payloads)

    assert [m.event_id for m in markets] == ["keep", "keep2"]
    assert dropped == {TOO_FEW_OUTCOMES: 1, NO_H2H_MARKET: 1, MALFORMED_EVENT: 1}


def test_custom_selector_is_used():
    def last_bookmaker(event: RawMarketEvent):
        for bookmaker in reversed(event.bookmakers):
            for market in bookmaker.markets:
                if market.key == "h2h":
                    return bookmaker, market
        return None

    payload = make_event("e1", [
        h2h_bookmaker("Pinnacle", [("A", 1.5), ("B", 2.6)]),
        h2h_bookmaker("Unibet", [("A", 1.6), ("B", 2.4)]),
    ])

    result = extract_market(parse_event(payload), selector=last_bookmaker)

    assert result.market.bookmaker == "Unibet"


def test_extracted_market_requires_two_outcomes():
    with pytest.raises(ValueError):
        ExtractedMarket(event_id="e1", start=None, outcome_names=["A"], decimal_odds=[1.5])
    with pytest.raises(ValueError):
        ExtractedMarket(event_id="e1", start=None, outcome_names=["A", "B"], decimal_odds=[1.5])


def test_null_markets_skip_bookmaker_not_event():
    payloads = [make_event("e1", [
        {"key": "betclic", "title": "Betclic", "markets": None},
        h2h_bookmaker("Pinnacle", [("Carlos Alcaraz", 1.8), ("Jannik Sinner", 2.2)]),
    ])]

    markets, dropped = extract_markets(payloads)

    assert len(markets) == 1
    assert markets[0].bookmaker == "Pinnacle"
    assert dropped == {}


def test_null_bookmakers_and_outcomes_are_empty():
    no_bookmakers = make_event("e1", None)
    null_outcomes = make_event("e2", [
        {"key": "unibet", "title": "Unibet", "markets": [{"key": "h2h", "outcomes": None}]},
    ])

    assert extract_market(parse_event(no_bookmakers)).drop_reason == NO_H2H_MARKET
    assert extract_market(parse_event(null_outcomes)).drop_reason == TOO_FEW_OUTCOMES
