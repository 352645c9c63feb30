# server/botapi/client.py
"""
Async client for a remote trading-bot REST API (freqtrade style).

Every call uses HTTP Basic auth built from the stored credentials, a fixed
per-attempt deadline and a bounded retry with exponential backoff. A 401 is
final: bad credentials won't get better by asking again.
"""
from __future__ import annotations

import asyncio
import base64
import json
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from .errors import AuthenticationFailed, BotApiError, RemoteApiError, RemoteUnavailable
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0  # seconds, per attempt


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class BotApiClient:
    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.base_url = base_url[:-1] if base_url.endswith("/") else base_url
        self.auth_header = basic_auth_header(username, password)
        self.timeout = timeout
        self.policy = policy or RetryPolicy()
        self._transport = transport
        self._sleep = sleep

    @classmethod
    def from_connection(cls, conn, **options) -> "BotApiClient":
        return cls(conn.api_url, conn.username, conn.password, **options)

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        headers = {
            "Authorization": self.auth_header,
            "Content-Type": "application/json",
        }
        content = json.dumps(body) if body is not None else None

        last_error: Optional[BaseException] = None
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as http:
            while attempt < self.policy.max_attempts:
                if attempt:
                    await self._sleep(self.policy.delay(attempt))
                attempt += 1
                try:
                    return await self._attempt(http, method, url, endpoint, headers, content, params)
                except (BotApiError, httpx.HTTPError, asyncio.TimeoutError) as e:
                    last_error = e
                    if not self.policy.is_retryable(e):
                        logger.error("Bot API request to %s failed on attempt %d, not retrying: %s", endpoint, attempt, e)
                        if isinstance(e, BotApiError):
                            raise
                        # callers only ever see BotApiError
                        raise RemoteUnavailable(endpoint, attempt, e) from e
                    if attempt >= self.policy.max_attempts:
                        break
                    logger.warning(
                        "Bot API attempt %d/%d failed for %s: %s",
                        attempt, self.policy.max_attempts, endpoint, str(e) or e.__class__.__name__,
                    )

        logger.error("Bot API request failed after %d attempts: %s (%s)", attempt, endpoint, last_error)
        raise RemoteUnavailable(endpoint, attempt, last_error) from last_error

    async def _attempt(self, http, method, url, endpoint, headers, content, params):
        # httpx timeouts are per phase; wait_for bounds the whole attempt
        response = await asyncio.wait_for(
            http.request(method, url, headers=headers, content=content, params=params),
            timeout=self.timeout,
        )
        if response.status_code == 401:
            raise AuthenticationFailed(endpoint)
        if not response.is_success:
            raise RemoteApiError(endpoint, response.status_code, response.reason_phrase)
        try:
            return response.json()
        except ValueError as e:
            raise RemoteApiError(endpoint, response.status_code, f"invalid JSON body ({e})") from e

    # --- bot endpoints ---

    async def ping(self):
        return await self.call("/api/v1/ping")

    async def get_trades(self):
        return await self.call("/api/v1/trades")

    async def get_open_trades(self):
        return await self.call("/api/v1/status")

    async def get_profit(self, days: int = 30):
        return await self.call("/api/v1/profit", params={"days": days})

    async def get_daily_profit(self, days: int = 7):
        return await self.call("/api/v1/daily", params={"days": days})

    async def get_stats(self):
        return await self.call("/api/v1/stats")

    async def get_balance(self):
        return await self.call("/api/v1/balance")

    async def get_performance(self):
        return await self.call("/api/v1/performance")

    async def get_count(self):
        return await self.call("/api/v1/count")

    async def backtest(self, config: dict):
        return await self.call("/api/v1/backtest", method="POST", body=config)
