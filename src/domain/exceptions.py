"""
Domain error taxonomy for stock dashboard requests.
Zero external dependencies.

Adapters and use cases raise these; the HTTP entry point collapses every one
of them into the same generic error response.
"""


class StockDataError(Exception):
    """Base class for any failure while building a stock dashboard."""


class StoreUnavailableError(StockDataError):
    """The datastore could not be reached or rejected the query."""


class MalformedStoreDataError(StockDataError):
    """The datastore answered with rows that do not parse into domain entities."""


class MissingDataError(StockDataError):
    """No price rows, or no summary row, exist for the requested ticker."""


class SeriesIntegrityError(StockDataError):
    """A price series is unordered, duplicate-dated or holds non-finite values."""
