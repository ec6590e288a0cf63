"""
FastAPI Application - Gate.io Live Rates

Runs the Gate.io ticker stream in the background and exposes its state.

Endpoints:
    - GET /          - API information
    - GET /health    - Connection state of the ticker stream
    - GET /symbols   - Pairs the stream subscribes to
    - GET /rates     - Latest normalized rate per pair (in memory only)
    - WS  /ws/rates  - Live `updateRate` events

Usage:
    uvicorn app.main:app --host 0.0.0.0 --port 8000
"""

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from core.config import settings, validate_configuration
from core.logging import logger, set_log_level
from core.rate_publisher import UPDATE_RATE_EVENT
from core.schemas import ConnectionState
from services.event_bus import bus
from services.gateio_rates import get_gateio_rate_service


# ============================================
# Lifespan Management
# ============================================

def configure_log_level() -> str:
    """Apply LOG_LEVEL, raised to DEBUG when DEBUG is enabled."""
    level = "DEBUG" if settings.debug else settings.log_level
    set_log_level(level)
    return level


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    logger.info(f"=== Application Starting ({settings.environment}) ===")
    validate_configuration()
    configure_log_level()
    await get_gateio_rate_service().start()
    logger.info("=== Started Successfully ===")

    yield

    logger.info("=== Shutting Down ===")
    try:
        await get_gateio_rate_service().stop()
        logger.info("=== Shutdown Complete ===")
    except Exception as e:
        logger.error(f"Shutdown error: {e}")


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="Gate.io Live Rates API",
    description=(
        "Live bid/ask rates for Gate.io spot pairs.\n\n"
        "- `GET /rates` - Latest rate per pair\n"
        "- `WS /ws/rates` - Stream of `updateRate` events "
        "(`{type, source, rate: {from, to, buy, sell}}`)"
    ),
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


# ============================================
# System Endpoints
# ============================================

@app.get("/", tags=["System"])
async def root():
    """API information."""
    return {
        "name": "Gate.io Live Rates API",
        "version": "1.0.0",
        "source": settings.rate_source_id,
        "environment": settings.environment,
        "docs": "/docs",
    }


@app.get("/health", tags=["System"])
async def health_check():
    """Ticker stream connection state."""
    client = get_gateio_rate_service().client
    return {
        "status": "healthy" if client.state == ConnectionState.OPEN else "degraded",
        "connection": client.state.value,
        "reconnect_attempts": client.backoff.attempts,
        "reconnects": client.reconnects,
        "symbols": len(client.subscription_symbols()),
        "updates_received": client.updates_received,
    }


# ============================================
# Rate Endpoints
# ============================================

@app.get("/symbols", tags=["Rates"])
async def list_symbols():
    """Pairs included in the ticker subscription."""
    client = get_gateio_rate_service().client
    return {"symbols": client.subscription_symbols(), "ignored": sorted(client.ignore_symbols)}


@app.get("/rates", tags=["Rates"])
async def list_rates():
    """Latest rate per pair since startup."""
    return {"source": settings.rate_source_id, "rates": get_gateio_rate_service().latest_rates()}


@app.get("/rates/{pair}", tags=["Rates"])
async def get_rate(pair: str):
    """Latest rate for one pair (e.g. BTC_USDT)."""
    rate = get_gateio_rate_service().latest_rates().get(pair.upper())
    if rate is None:
        raise HTTPException(status_code=404, detail=f"No rate seen yet for {pair.upper()}")
    return rate


@app.websocket("/ws/rates")
async def websocket_rates(websocket: WebSocket):
    """
    Forward every `updateRate` event to the client.

    Example:
        ws://localhost:8000/ws/rates
    """
    await websocket.accept()
    logger.info("WS connected: rates")
    queue = await bus.subscribe(UPDATE_RATE_EVENT)
    try:
        while True:
            event = await queue.get()
            await websocket.send_json(event)
    except WebSocketDisconnect:
        logger.info("WS disconnected: rates")
    except Exception as e:
        logger.error(f"WS error rates: {e}")
    finally:
        await bus.unsubscribe(UPDATE_RATE_EVENT, queue)
        logger.info("WS ended: rates")


# ============================================
# Error Handlers
# ============================================

@app.exception_handler(500)
async def internal_error_handler(request, exc):
    """Handle 500 errors."""
    logger.error(f"Internal error: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
