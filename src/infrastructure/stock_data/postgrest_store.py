"""
Infrastructure adapter: Supabase REST (PostgREST) → IStockDataStore.

All HTTP, query-string and row-decoding details are confined here; the rest of
the codebase depends only on IStockDataStore and the domain entities.

Supabase caps the rows returned per response (1000 by default, possibly less than
the requested page size), so the price history is read page by page with
limit/offset until an empty page arrives.
"""

import logging
import math
from typing import Any

import httpx

from src.domain.entities.stock_price import PriceRecord, SummaryRecord
from src.domain.exceptions import (
    MalformedStoreDataError,
    MissingDataError,
    StoreUnavailableError,
)
from src.domain.ports.stock_data_port import IStockDataStore

logger = logging.getLogger(__name__)


class PostgrestStockDataStore(IStockDataStore):
    """Reads stock_prices / stock_summaries rows through the Supabase REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        prices_table: str = "stock_prices",
        summaries_table: str = "stock_summaries",
        page_size: int = 1000,
    ) -> None:
        """
        Args:
            client:          AsyncClient whose base_url is the Supabase project URL
                             and whose default headers carry the API key
                             (see build_client()).
            prices_table:    Table holding one row per ticker and trading day.
            summaries_table: Table holding one precomputed row per ticker.
            page_size:       Rows requested per page. A server cap below this
                             only costs extra requests.
        """
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self._client = client
        self._prices_table = prices_table
        self._summaries_table = summaries_table
        self._page_size = page_size

    @staticmethod
    def build_client(base_url: str, api_key: str, timeout: float = 10.0) -> httpx.AsyncClient:
        """Create the shared AsyncClient for a Supabase project."""
        return httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # IStockDataStore interface
    # ------------------------------------------------------------------

    async def fetch_price_series(self, ticker: str) -> list[PriceRecord]:
        records: list[PriceRecord] = []
        offset = 0
        while True:
            rows = await self._select(
                self._prices_table,
                {
                    "select": "*",
                    "ticker": f"eq.{ticker}",
                    "order": "date.asc",
                    "limit": str(self._page_size),
                    "offset": str(offset),
                },
            )
            records.extend(self._to_price_record(row) for row in rows)
            if not rows:
                break
            offset += len(rows)
        logger.debug("Fetched %d price rows for %s", len(records), ticker)
        return records

    async def fetch_summary(self, ticker: str) -> SummaryRecord:
        # limit=2 is enough to tell "exactly one" from "more than one".
        rows = await self._select(
            self._summaries_table,
            {"select": "*", "ticker": f"eq.{ticker}", "limit": "2"},
        )
        if not rows:
            raise MissingDataError(f"no summary row stored for {ticker!r}")
        if len(rows) > 1:
            raise StoreUnavailableError(
                f"{self._summaries_table} holds more than one row for {ticker!r}"
            )
        return self._to_summary_record(ticker, rows[0])

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _select(self, table: str, params: dict[str, str]) -> list[dict]:
        try:
            response = await self._client.get(f"/{table}", params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StoreUnavailableError(
                f"{table} query failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise StoreUnavailableError(f"{table} query failed: {exc!r}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedStoreDataError(f"{table} returned a non-JSON body") from exc
        if not isinstance(body, list):
            raise MalformedStoreDataError(
                f"{table} returned {type(body).__name__}, expected a list of rows"
            )
        return body

    @staticmethod
    def _to_price_record(row: Any) -> PriceRecord:
        try:
            return PriceRecord(
                date=_iso_date(row["date"]),
                ticker=str(row["ticker"]),
                open=float(row["open"]),
                high=float(row["high"]),
                low=float(row["low"]),
                close=float(row["close"]),
                volume=_whole_number(row["volume"]),
            )
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            raise MalformedStoreDataError(f"unparsable price row: {exc!r}") from exc

    @staticmethod
    def _to_summary_record(ticker: str, row: Any) -> SummaryRecord:
        """Keep the summary row exactly as stored; only JSON-unsafe values are refused."""
        if not isinstance(row, dict):
            raise MalformedStoreDataError(
                f"summary row is {type(row).__name__}, expected an object"
            )
        for column, value in row.items():
            if isinstance(value, float) and not math.isfinite(value):
                raise MalformedStoreDataError(f"summary column {column!r} is not finite")
        return SummaryRecord(ticker=ticker, fields=dict(row))


def _iso_date(value: Any) -> str:
    """Reduce a date or timestamp column value to its YYYY-MM-DD part."""
    if not isinstance(value, str):
        raise TypeError(f"date must be a string, got {type(value).__name__}")
    return value.split("T", 1)[0]


def _whole_number(value: Any) -> int:
    """int(value), refusing fractional or boolean values instead of truncating them."""
    if isinstance(value, bool):
        raise TypeError("volume must be a number, got bool")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"volume must be a whole number, got {value!r}")
    return int(value)
