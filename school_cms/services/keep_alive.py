"""
Keep-alive task.
Pings the database and, when configured, the service's own health endpoint on a
fixed interval so free-tier hosts do not put the service to sleep.

The task is owned by whoever creates it (main.py does so on startup) and has an
explicit start/stop lifecycle.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import httpx
from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker

logger = logging.getLogger(__name__)


@dataclass
class PingResult:
    at: datetime
    database_ok: bool
    health_status: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.database_ok and self.error is None


class KeepAliveTask:
    """
    Periodic database + health endpoint ping.

    Args:
        session_factory: Factory for the session used by the database ping
        interval_seconds: Time between pings
        health_url: URL to GET on every ping; None disables the HTTP ping
        timeout_seconds: HTTP timeout for the health ping
        start_delay_seconds: Wait before the first ping
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        interval_seconds: float = 300,
        health_url: Optional[str] = None,
        timeout_seconds: float = 10.0,
        start_delay_seconds: float = 0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.health_url = health_url
        self.timeout_seconds = timeout_seconds
        self.start_delay_seconds = start_delay_seconds
        self.transport = transport
        self.last_result: Optional[PingResult] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the ping loop on the running event loop."""
        if self.is_running:
            logger.warning("Keep-alive task already running")
            return

        logger.info(
            f"Starting keep-alive task (interval: {self.interval_seconds}s, "
            f"health check URL: {self.health_url or 'not configured'})"
        )
        self._task = asyncio.create_task(self._run(), name="keep-alive")

    async def stop(self) -> None:
        """Cancel the ping loop and wait for it to finish."""
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Keep-alive task stopped")

    async def _run(self) -> None:
        if self.start_delay_seconds:
            await asyncio.sleep(self.start_delay_seconds)
        while True:
            await self.ping()
            await asyncio.sleep(self.interval_seconds)

    async def ping(self) -> PingResult:
        """
        One database ping plus one health endpoint ping.
        Failures are logged and reported in the result, never raised.
        """
        result = PingResult(at=datetime.now(timezone.utc), database_ok=False)
        logger.info(f"Keep-alive ping at {result.at.isoformat()}")

        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
            result.database_ok = True
        except Exception as e:
            result.error = f"database ping failed: {e}"
            logger.error(f"Keep-alive database ping failed: {str(e)}")

        if self.health_url:
            result.health_status = await self._ping_health_endpoint()

        self.last_result = result
        return result

    async def _ping_health_endpoint(self) -> Optional[int]:
        # A failed health ping is logged but does not mark the ping as failed
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.get(self.health_url)
        except httpx.HTTPError as e:
            logger.warning(f"Health endpoint ping failed: {str(e)}")
            return None

        if response.status_code >= 500:
            logger.warning(f"Health endpoint returned {response.status_code}")
        else:
            logger.info(f"Health endpoint ping successful ({response.status_code})")
        return response.status_code
