"""
Domain entities for daily stock price data and the dashboard built from it.
Zero external dependencies — pure Python dataclasses only.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PriceRecord:
    date: str
    ticker: str
    open: float
    high: float
    low: float
    close: float
    volume: int


@dataclass(frozen=True)
class EnrichedPriceRecord:
    """A PriceRecord plus its trailing moving averages.

    Each derived field is None until a full window of history exists.
    """

    date: str
    ticker: str
    open: float
    high: float
    low: float
    close: float
    volume: int
    ma20: Optional[float]
    ma50: Optional[float]
    avg_volume_20: Optional[float]


@dataclass(frozen=True)
class SummaryRecord:
    """Precomputed ticker-level aggregate, kept exactly as the store returned it.

    *fields* holds every stored column (52-week range, price position, average
    volume, trailing returns and whatever else the table carries).
    """

    ticker: str
    fields: dict[str, Any]


@dataclass(frozen=True)
class StockDashboard:
    ticker: str
    prices: list[EnrichedPriceRecord]
    summary: SummaryRecord
