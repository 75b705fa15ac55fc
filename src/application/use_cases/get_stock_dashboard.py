"""
Use-case: build the chart dashboard (enriched price series + summary) for a ticker.
Depends only on Domain ports and entities, plus the series enricher service.
"""

import asyncio
import logging

from src.application.services.series_enricher import enrich, validate_series
from src.domain.entities.stock_price import StockDashboard
from src.domain.exceptions import MissingDataError
from src.domain.ports.stock_data_port import IStockDataStore

logger = logging.getLogger(__name__)


class GetStockDashboardUseCase:
    def __init__(self, store: IStockDataStore) -> None:
        self._store = store

    async def execute(self, ticker: str) -> StockDashboard:
        """Fetch, validate and enrich the full price history of *ticker*.

        The price series and the summary are fetched concurrently. If either
        fetch fails, or the caller cancels, the other one is cancelled too and
        no partial dashboard is produced.

        Args:
            ticker: Ticker symbol (case-insensitive).

        Raises:
            ValueError:           if *ticker* is blank.
            MissingDataError:     if the store holds no price rows or no summary.
            SeriesIntegrityError: if the stored series is unordered or corrupt.
            Any other StockDataError propagated from the IStockDataStore.
        """
        if not ticker or not ticker.strip():
            raise ValueError("ticker must be a non-empty string")
        symbol = ticker.upper().strip()

        prices_task = asyncio.ensure_future(self._store.fetch_price_series(symbol))
        summary_task = asyncio.ensure_future(self._store.fetch_summary(symbol))
        try:
            series, summary = await asyncio.gather(prices_task, summary_task)
        except BaseException:
            prices_task.cancel()
            summary_task.cancel()
            raise

        if not series:
            raise MissingDataError(f"no price rows stored for {symbol!r}")
        validate_series(series)

        prices = enrich(series)
        logger.info("Built dashboard for %s with %d records", symbol, len(prices))
        return StockDashboard(ticker=symbol, prices=prices, summary=summary)
