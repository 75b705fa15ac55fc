"""
Application service: derive trailing moving averages for a daily price series.

Business decisions owned here:
  - Window lengths: 20/50 sessions for close, 20 sessions for volume.
  - Boundary policy: a moving average is None until a full window exists;
    it is never approximated over a shorter window.
  - Averages are positional (one sample per record), so calendar gaps between
    trading days do not matter. Ordering and duplicates do, which is why
    validate_series() must run before enrich().

Pure functions only — no I/O and no state.
"""

import math
from datetime import date
from typing import Optional, Sequence

from src.domain.entities.stock_price import EnrichedPriceRecord, PriceRecord
from src.domain.exceptions import SeriesIntegrityError

MA_SHORT_WINDOW: int = 20
MA_LONG_WINDOW: int = 50
VOLUME_WINDOW: int = 20


def trailing_mean(values: Sequence[float], window: int) -> list[Optional[float]]:
    """Simple trailing mean of *values* over *window* samples.

    Position ``i`` holds the mean of ``values[i - window + 1 : i + 1]``, or None
    while ``i < window - 1``.

    Raises:
        ValueError: if *window* is smaller than 1.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    return [
        math.fsum(values[i - window + 1 : i + 1]) / window if i >= window - 1 else None
        for i in range(len(values))
    ]


def validate_series(series: Sequence[PriceRecord]) -> None:
    """Reject a series that would silently corrupt the averages.

    Raises:
        SeriesIntegrityError: on an unparsable or non-ascending date (which
            covers duplicates), a ticker that differs from the first record's,
            or a non-finite close/volume.
    """
    previous: Optional[date] = None
    for idx, record in enumerate(series):
        try:
            current = date.fromisoformat(record.date)
        except (TypeError, ValueError) as exc:
            raise SeriesIntegrityError(
                f"record {idx} has an invalid date: {record.date!r}"
            ) from exc
        if previous is not None and current <= previous:
            raise SeriesIntegrityError(
                f"record {idx} ({record.date}) is not after {previous.isoformat()}"
            )
        if record.ticker != series[0].ticker:
            raise SeriesIntegrityError(
                f"record {idx} belongs to {record.ticker!r}, expected {series[0].ticker!r}"
            )
        try:
            finite = math.isfinite(record.close) and math.isfinite(record.volume)
        except OverflowError:
            finite = False
        if not finite:
            raise SeriesIntegrityError(f"record {idx} ({record.date}) has a non-finite value")
        previous = current


def enrich(series: Sequence[PriceRecord]) -> list[EnrichedPriceRecord]:
    """Attach MA20, MA50 and the 20-day average volume to every record.

    The output has the same length and order as *series*; the input is assumed
    to have passed validate_series().
    """
    closes = [record.close for record in series]
    volumes = [record.volume for record in series]
    ma20 = trailing_mean(closes, MA_SHORT_WINDOW)
    ma50 = trailing_mean(closes, MA_LONG_WINDOW)
    avg_volume_20 = trailing_mean(volumes, VOLUME_WINDOW)

    return [
        EnrichedPriceRecord(
            date=record.date,
            ticker=record.ticker,
            open=record.open,
            high=record.high,
            low=record.low,
            close=record.close,
            volume=record.volume,
            ma20=ma20[i],
            ma50=ma50[i],
            avg_volume_20=avg_volume_20[i],
        )
        for i, record in enumerate(series)
    ]
