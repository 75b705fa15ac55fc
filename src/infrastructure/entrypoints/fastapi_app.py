"""
FastAPI entry point — stock dashboard API.

This module is the Composition Root: it loads configuration, wires the
PostgREST store adapter into GetStockDashboardUseCase at startup and exposes
the read endpoint consumed by the browser dashboard.

Every failure of GET /api/stocks/{ticker} collapses into the same 500 body;
the specific cause is only logged.

Run locally:
    uvicorn src.infrastructure.entrypoints.fastapi_app:app --reload --port 8000
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()

from src.application.use_cases.get_stock_dashboard import GetStockDashboardUseCase  # noqa: E402
from src.domain.entities.stock_price import EnrichedPriceRecord, StockDashboard  # noqa: E402
from src.domain.exceptions import StockDataError, StoreUnavailableError  # noqa: E402
from src.infrastructure.config import Settings  # noqa: E402
from src.infrastructure.stock_data.postgrest_store import PostgrestStockDataStore  # noqa: E402

settings = Settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Failed to fetch stock data"
NO_STORE_HEADERS = {"Cache-Control": "no-store"}


# ---------------------------------------------------------------------------
# Composition Root — wire the store once per process, close it on shutdown
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings.require_store_credentials()
    client = PostgrestStockDataStore.build_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        timeout=settings.STORE_TIMEOUT_SECONDS,
    )
    store = PostgrestStockDataStore(
        client,
        prices_table=settings.STOCK_PRICES_TABLE,
        summaries_table=settings.STOCK_SUMMARIES_TABLE,
        page_size=settings.STORE_PAGE_SIZE,
    )
    app.state.dashboard_use_case = GetStockDashboardUseCase(store)
    logger.info("Stock store wired to %s", settings.SUPABASE_URL)
    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(title="Stock Dashboard API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Response schema
# ---------------------------------------------------------------------------
class PriceRecordResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    ticker: str
    open: float
    high: float
    low: float
    close: float
    volume: int
    ma20: Optional[float] = Field(alias="MA20")
    ma50: Optional[float] = Field(alias="MA50")
    avg_volume_20: Optional[float] = Field(alias="avg_20day_volume")

    @classmethod
    def from_entity(cls, record: EnrichedPriceRecord) -> "PriceRecordResponse":
        return cls(
            date=record.date,
            ticker=record.ticker,
            open=record.open,
            high=record.high,
            low=record.low,
            close=record.close,
            volume=record.volume,
            ma20=record.ma20,
            ma50=record.ma50,
            avg_volume_20=record.avg_volume_20,
        )


class ChartData(BaseModel):
    price_data: list[PriceRecordResponse]
    volume_data: list[PriceRecordResponse]


class DashboardResponse(BaseModel):
    data: ChartData
    # Passed through exactly as stored.
    summary: dict[str, Any]

    @classmethod
    def from_entity(cls, dashboard: StockDashboard) -> "DashboardResponse":
        records = [PriceRecordResponse.from_entity(r) for r in dashboard.prices]
        # Both charts read the same enriched records, by different fields.
        return cls(
            data=ChartData(price_data=records, volume_data=records),
            summary=dashboard.summary.fields,
        )


class ErrorResponse(BaseModel):
    error: str


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
def get_dashboard_use_case(request: Request) -> GetStockDashboardUseCase:
    return request.app.state.dashboard_use_case


def get_request_timeout() -> float:
    return settings.REQUEST_TIMEOUT_SECONDS


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@app.get(
    "/api/stocks/{ticker}",
    response_model=DashboardResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_stock(
    ticker: str,
    response: Response,
    use_case: GetStockDashboardUseCase = Depends(get_dashboard_use_case),
    timeout: float = Depends(get_request_timeout),
):
    """Enriched daily prices (for both the price and the volume chart) plus the summary."""
    try:
        dashboard = await asyncio.wait_for(use_case.execute(ticker), timeout=timeout)
        payload = DashboardResponse.from_entity(dashboard)
    except StoreUnavailableError:
        logger.exception("Store unavailable while fetching %r", ticker)
        return _error_response()
    except StockDataError as exc:
        logger.warning("%s for %r: %s", type(exc).__name__, ticker, exc)
        return _error_response()
    except asyncio.TimeoutError:
        logger.warning("Timed out after %.1fs fetching %r", timeout, ticker)
        return _error_response()
    except ValueError as exc:
        logger.warning("Rejected ticker %r: %s", ticker, exc)
        return _error_response()
    except Exception:
        logger.exception("Unexpected failure fetching %r", ticker)
        return _error_response()

    response.headers["Cache-Control"] = "no-store"
    return payload


@app.get("/health")
async def health():
    return {"status": "ok"}


def _error_response() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": ERROR_MESSAGE},
        headers=NO_STORE_HEADERS,
    )
