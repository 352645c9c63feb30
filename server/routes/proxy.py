# server/routes/proxy.py
from __future__ import annotations
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from registry.session import get_registry_session
from registry.api import get_connection
from botapi.client import BotApiClient
from botapi.errors import BotApiError
from botapi.schemas import BacktestRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def get_client_options() -> dict:
    """Extra BotApiClient kwargs (transport, sleep, policy); overridden in tests."""
    return {}


async def get_bot_client(
    connection_id: int,
    reg: AsyncSession = Depends(get_registry_session),
    options: dict = Depends(get_client_options),
) -> BotApiClient:
    conn = await get_connection(reg, connection_id)
    if not conn:
        raise HTTPException(status_code=404, detail="connection not found")
    return BotApiClient.from_connection(conn, **options)


async def _relay(call, failure: str):
    try:
        return await call
    except BotApiError as e:
        logger.info("%s: %s", failure, e.message)
        raise HTTPException(status_code=e.status_code, detail=f"{failure}: {e.message}")


@router.get("/freqtrade/{connection_id}/ping")
async def ping(client: BotApiClient = Depends(get_bot_client)):
    return await _relay(client.ping(), "Failed to connect")


@router.get("/freqtrade/{connection_id}/trades")
async def trades(client: BotApiClient = Depends(get_bot_client)):
    return await _relay(client.get_trades(), "Failed to fetch trades")


@router.get("/freqtrade/{connection_id}/open-trades")
async def open_trades(client: BotApiClient = Depends(get_bot_client)):
    return await _relay(client.get_open_trades(), "Failed to fetch open trades")


@router.get("/freqtrade/{connection_id}/stats")
async def stats(client: BotApiClient = Depends(get_bot_client)):
    return await _relay(client.get_stats(), "Failed to fetch stats")


@router.get("/freqtrade/{connection_id}/daily-profit")
async def daily_profit(
    days: int = Query(7, ge=1, description="Number of days to break down"),
    client: BotApiClient = Depends(get_bot_client),
):
    return await _relay(client.get_daily_profit(days), "Failed to fetch daily profit")


@router.get("/freqtrade/{connection_id}/count")
async def count(client: BotApiClient = Depends(get_bot_client)):
    return await _relay(client.get_count(), "Failed to fetch count")


@router.get("/freqtrade/{connection_id}/profit")
async def profit(
    days: int = Query(30, ge=1, description="Profit window in days"),
    client: BotApiClient = Depends(get_bot_client),
):
    return await _relay(client.get_profit(days), "Failed to fetch profit")


@router.get("/freqtrade/{connection_id}/balance")
async def balance(client: BotApiClient = Depends(get_bot_client)):
    return await _relay(client.get_balance(), "Failed to fetch balance")


@router.get("/freqtrade/{connection_id}/performance")
async def performance(client: BotApiClient = Depends(get_bot_client)):
    return await _relay(client.get_performance(), "Failed to fetch performance")


@router.post("/freqtrade/{connection_id}/backtest")
async def backtest(payload: BacktestRequest, client: BotApiClient = Depends(get_bot_client)):
    return await _relay(client.backtest(payload.to_remote()), "Backtest failed")
