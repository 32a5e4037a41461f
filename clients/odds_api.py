"""
Client for The Odds API v4.

Only two endpoints are used:
    GET /sports/                  sports catalog, filtered here to tennis
    GET /sports/{key}/odds        head-to-head odds in decimal format

No retries: a failed request is final for that call. What a failure means
depends on the FailurePolicy passed to fetch_markets.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from config.settings import Settings
from core.errors import UpstreamError
from core.models import CompetitionDescriptor, FailurePolicy, MarketFetchResult
from utils.logger import get_logger

logger = get_logger(__name__)

SPORT_KEYWORD = "tennis"
MARKETS = "h2h"
ODDS_FORMAT = "decimal"


def is_tennis(sport: Dict[str, Any]) -> bool:
    """True if the group, details or title of a catalog entry mentions tennis."""
    for field in ("group", "details", "title"):
        value = sport.get(field) or ""
        if SPORT_KEYWORD in str(value).lower():
            return True
    return False


class OddsApiClient:
    """Read-only access to the sports catalog and odds endpoints."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.api_key = settings.require_api_key()
        self.base_url = settings.ODDS_API_BASE_URL.rstrip("/")
        self.timeout = settings.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _redact(self, text: str) -> str:
        """Mask the API key in text that may echo the request URL."""
        return text.replace(self.api_key, "***") if self.api_key else text

    def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        url = f"{self.base_url}/{path}"
        query = dict(params or {})
        query["apiKey"] = self.api_key

        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise UpstreamError(url, reason=self._redact(f"{type(e).__name__}: {e}")) from e

        remaining = response.headers.get("x-requests-remaining", "unknown")
        used = response.headers.get("x-requests-used", "unknown")
        logger.debug(f"GET {url} -> {response.status_code} (quota used={used}, remaining={remaining})")

        if not 200 <= response.status_code < 300:
            raise UpstreamError(url, status=response.status_code, reason=response.reason or "")

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(url, status=response.status_code, reason="invalid JSON body") from e

    def list_tennis_competitions(self) -> List[CompetitionDescriptor]:
        """
        Fetch the sports catalog and keep tennis competitions, active or not.

        Raises:
            UpstreamError: If the catalog cannot be fetched
        """
        data = self._get_json("sports/")
        if not isinstance(data, list):
            raise UpstreamError(f"{self.base_url}/sports/", reason="unexpected catalog payload")

        competitions = []
        for sport in data:
            if not isinstance(sport, dict) or not sport.get("key"):
                continue
            if is_tennis(sport):
                competitions.append(CompetitionDescriptor(
                    key=sport["key"],
                    title=sport.get("title") or "",
                    active=bool(sport.get("active")),
                    group=sport.get("group"),
                    details=sport.get("details"),
                ))

        logger.debug(f"Catalog lists {len(data)} sports, {len(competitions)} tennis")
        return competitions

    def list_active_tennis_competitions(self) -> List[CompetitionDescriptor]:
        """Tennis competitions currently marked active upstream."""
        return [c for c in self.list_tennis_competitions() if c.active]

    def fetch_markets(self, competition_key: str, region: str,
                      policy: FailurePolicy = FailurePolicy.LENIENT) -> MarketFetchResult:
        """
        Fetch head-to-head odds for one competition and region.

        Args:
            competition_key: Upstream sport key, e.g. "tennis_atp_us_open"
            region: Bookmaker region, e.g. "eu"
            policy: STRICT raises on failure, LENIENT returns a failed result

        Returns:
            MarketFetchResult with the raw event payloads

        Raises:
            UpstreamError: On failure under the STRICT policy
        """
        params = {
            "regions": region,
            "markets": MARKETS,
            "oddsFormat": ODDS_FORMAT,
        }
        try:
            data = self._get_json(f"sports/{competition_key}/odds", params)
        except UpstreamError as e:
            if policy == FailurePolicy.STRICT:
                raise
            logger.warning(f"Odds fetch failed for {competition_key} (region={region}): {e}")
            return MarketFetchResult(
                competition_key=competition_key,
                region=region,
                failed=True,
                error=str(e),
            )

        events = data if isinstance(data, list) else []
        return MarketFetchResult(competition_key=competition_key, region=region, events=events)
