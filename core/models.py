from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FailurePolicy(str, Enum):
    STRICT = "strict"    # a failed market fetch aborts the run
    LENIENT = "lenient"  # a failed market fetch yields no events


class CompetitionDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str
    title: str = ""
    active: bool = False
    group: Optional[str] = None
    details: Optional[str] = None


class Outcome(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Optional[str] = None
    price: Optional[float] = None


class Market(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    key: Optional[str] = None  # e.g. "h2h"
    outcomes: List[Outcome] = Field(default_factory=list)

    @field_validator("outcomes", mode="before")
    @classmethod
    def _null_outcomes(cls, value):
        return [] if value is None else value


class Bookmaker(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    key: Optional[str] = None
    title: Optional[str] = None
    markets: List[Market] = Field(default_factory=list)

    @field_validator("markets", mode="before")
    @classmethod
    def _null_markets(cls, value):
        return [] if value is None else value

    @property
    def label(self) -> str:
        return self.title or self.key or ""


class RawMarketEvent(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[str] = None
    commence_time: Optional[str] = None
    sport_key: Optional[str] = None
    home_team: Optional[str] = None
    away_team: Optional[str] = None
    bookmakers: List[Bookmaker] = Field(default_factory=list)

    @field_validator("bookmakers", mode="before")
    @classmethod
    def _null_bookmakers(cls, value):
        return [] if value is None else value


class ExtractedMarket(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_id: Optional[str]
    start: Optional[str]
    outcome_names: List[str]
    decimal_odds: List[float]
    bookmaker: str = ""

    @model_validator(mode="after")
    def _check_outcomes(self):
        if len(self.outcome_names) != len(self.decimal_odds):
            raise ValueError("outcome_names and decimal_odds must have equal length")
        if len(self.decimal_odds) < 2:
            raise ValueError("a head-to-head market needs at least two priced outcomes")
        return self


class NormalizedRow(BaseModel):
    """An extracted market with its de-vigged probabilities.

    Probabilities that came out non-finite are stored as None.
    """
    model_config = ConfigDict(frozen=True)

    market: ExtractedMarket
    probabilities: List[Optional[float]]


class ExtractionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_id: Optional[str] = None
    market: Optional[ExtractedMarket] = None
    drop_reason: Optional[str] = None

    @property
    def kept(self) -> bool:
        return self.market is not None


class MarketFetchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    competition_key: str
    region: str
    events: List[Any] = Field(default_factory=list)
    failed: bool = False
    error: Optional[str] = None


class ScanHistoryRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: str
    key: str
    title: str
    region: str
    count: int  # -1 means the fetch failed for this pair


class CollectionReport(BaseModel):
    """Rows accumulated over one run, plus what was dropped or failed on the way."""

    rows: List[dict] = Field(default_factory=list)
    dropped: Dict[str, int] = Field(default_factory=dict)
    failed: List[Tuple[str, str]] = Field(default_factory=list)

    @property
    def dropped_total(self) -> int:
        return sum(self.dropped.values())
