"""
Port (interface) for the stock datastore.
Infrastructure adapters (e.g. PostgrestStockDataStore) must implement this interface.
"""

from abc import ABC, abstractmethod

from src.domain.entities.stock_price import PriceRecord, SummaryRecord


class IStockDataStore(ABC):
    @abstractmethod
    async def fetch_price_series(self, ticker: str) -> list[PriceRecord]:
        """Return every stored daily record for *ticker*, ascending by date.

        An unknown ticker yields an empty list rather than an error.

        Raises:
            StoreUnavailableError:   on transport or query failure.
            MalformedStoreDataError: if a row cannot be parsed.
        """
        ...

    @abstractmethod
    async def fetch_summary(self, ticker: str) -> SummaryRecord:
        """Return the single precomputed summary row for *ticker*.

        Raises:
            MissingDataError:        if no row matches.
            StoreUnavailableError:   if more than one row matches, or on
                                     transport or query failure.
            MalformedStoreDataError: if the row is not an object or holds a
                                     value that cannot be sent back as JSON.
        """
        ...
