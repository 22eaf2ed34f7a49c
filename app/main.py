"""
FastAPI Application - RSI Monitor API

Buckets every trading Binance spot USDT pair by its latest RSI.

Endpoints:
    - POST /api/monitorRSI  body {"timeframe": "1h"}
    - GET  /api/monitorRSI?timeframe=1h
    - GET  /health
    - GET  /

Usage:
    uvicorn app.main:app --host 0.0.0.0 --port 5084

Docs:
    - Swagger: http://localhost:5084/docs
"""

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Annotated

from core.config import settings, validate_configuration
from core.errors import UpstreamError
from core.logging import logger, set_log_level
from core.schemas import CategorizedRSI, MonitorRSIRequest
from exchanges.binance import BinanceAPIClient
from services.rsi_monitor import RSIMonitor
from services.symbol_directory import SymbolDirectory
from storage import TTLCache


# ============================================
# Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the Binance session and wire the monitor; close it on shutdown."""
    logger.info("=== Application Starting ===")
    validate_configuration()
    if settings.debug:
        set_log_level("DEBUG")

    async with BinanceAPIClient() as client:
        _wire_services(app, client)
        logger.info("=== Started Successfully ===")
        yield
        logger.info("=== Shutting Down ===")
    logger.info("=== Shutdown Complete ===")


def _wire_services(app: FastAPI, client: BinanceAPIClient) -> None:
    directory = SymbolDirectory(
        client,
        TTLCache(ttl=settings.symbols_cache_ttl),
        quote_asset=settings.quote_asset,
        strict=settings.symbols_strict
    )
    app.state.client = client
    app.state.directory = directory
    app.state.monitor = RSIMonitor(
        directory,
        client,
        kline_limit=settings.kline_limit,
        rsi_period=settings.rsi_period,
        min_closing_prices=settings.min_closing_prices,
        max_concurrency=settings.max_concurrency,
        symbol_timeout=settings.symbol_timeout
    )


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="RSI Monitor API",
    description=(
        "Classifies Binance spot trading pairs by their latest RSI.\n\n"
        "Categories: `below20`, `between20and30`, `between30and40`, `between40and50`, "
        "`between50and60`, `between60and70`, `between70and80`, `above80`."
    ),
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"]
)


def get_monitor(request: Request) -> RSIMonitor:
    return request.app.state.monitor


def get_directory(request: Request) -> SymbolDirectory:
    return request.app.state.directory


# ============================================
# System Endpoints
# ============================================

@app.get("/", tags=["System"], response_class=PlainTextResponse)
async def root():
    return "Hello World!"


@app.get("/health", tags=["System"])
async def health_check(directory: SymbolDirectory = Depends(get_directory)):
    """Liveness check; reports the cached trading pairs and their age."""
    age = directory.cache_age()
    return {
        "status": "ok",
        "cached_symbols": directory.cached_count(),
        "cache_age_seconds": None if age is None else round(age, 1)
    }


# ============================================
# RSI Endpoints
# ============================================

async def _monitor_rsi(monitor: RSIMonitor, timeframe: str):
    logger.info(f"RSI request started (timeframe={timeframe})")
    try:
        result = await monitor.aggregate(timeframe)
    except UpstreamError as e:
        logger.error(f"Error fetching trading pairs: {e}")
        return JSONResponse(status_code=502, content={"error": "Failed to fetch trading pairs"})
    except Exception as e:
        logger.error(f"Error fetching or processing RSI data: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch RSI data"})
    logger.info(f"RSI request finished (timeframe={timeframe}, symbols={result.total()})")
    return result


@app.post("/api/monitorRSI", tags=["RSI"], response_model=CategorizedRSI)
async def monitor_rsi(body: MonitorRSIRequest, monitor: RSIMonitor = Depends(get_monitor)):
    """
    Bucket all trading pairs by their latest RSI on the requested timeframe.

    Body:
        {"timeframe": "1h"}  (any Binance kline interval: 1m, 5m, 1h, 4h, 1d, ...)
    """
    return await _monitor_rsi(monitor, body.timeframe)


@app.get("/api/monitorRSI", tags=["RSI"], response_model=CategorizedRSI)
async def monitor_rsi_get(
    query: Annotated[MonitorRSIRequest, Query()],
    monitor: RSIMonitor = Depends(get_monitor)
):
    """Query-string form of POST /api/monitorRSI, validated the same way."""
    return await _monitor_rsi(monitor, query.timeframe)
