"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.domain.entities.stock_price import PriceRecord, SummaryRecord


def make_series(
    closes: list[float],
    volumes: list[int] | None = None,
    ticker: str = "AAPL",
    start: date = date(2024, 1, 1),
) -> list[PriceRecord]:
    """Build an ascending daily series with one record per close value."""
    volumes = volumes if volumes is not None else [1000] * len(closes)
    return [
        PriceRecord(
            date=(start + timedelta(days=i)).isoformat(),
            ticker=ticker,
            open=close,
            high=close + 1,
            low=close - 1,
            close=close,
            volume=volume,
        )
        for i, (close, volume) in enumerate(zip(closes, volumes))
    ]


@pytest.fixture()
def summary() -> SummaryRecord:
    return SummaryRecord(
        ticker="AAPL",
        fields={
            "id": 7,
            "ticker": "AAPL",
            "latest_price": 189.5,
            "52_week_low": 124.2,
            "52_week_high": 199.6,
            "price_position": 0.87,
            "avg_volume": 55_000_000,
            "weekly_return": 1.2,
            "monthly_return": -3.4,
            "yearly_return": 28.9,
            "updated_at": "2024-01-25T21:00:00+00:00",
        },
    )


@pytest.fixture()
def flat_series() -> list[PriceRecord]:
    """25 sessions at close=100 and volume=1000."""
    return make_series([100.0] * 25, [1000] * 25)


@pytest.fixture()
def series_factory():
    """Expose make_series() to tests without importing conftest directly."""
    return make_series
