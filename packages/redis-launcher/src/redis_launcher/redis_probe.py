"""Redis readiness probe."""

import asyncio
import logging
from dataclasses import dataclass

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


@dataclass
class RedisProber:
    """
    Bounded-timeout health probe against a Redis endpoint.

    Issues INFO, the same command the pool's shell tooling used, so a probe
    succeeds only when the server accepts commands (and the password, if
    one is configured).

    Attributes:
        password: Authentication secret, or None.

    Example:
        prober = RedisProber(password="secret")
        if await prober.probe("10.0.0.5", 6379, timeout=3.0):
            print("primary is up")
    """

    password: str | None = None

    async def probe(self, address: str, port: int, timeout: float) -> bool:
        """
        Check Redis connectivity.

        Returns:
            True if INFO succeeded within timeout, False otherwise.

        Note:
            Catches RedisError, OSError and timeouts, returning False.
            Does not raise exceptions - safe for polling loops.
        """
        try:
            await self._info(address, port, timeout)
            return True
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            logger.debug("Probe of %s:%s failed: %s", address, port, e)
            return False

    async def run_id(self, address: str, port: int, timeout: float) -> str | None:
        """
        Read the server run_id from INFO server.

        Returns:
            The run_id, or None if the server is unreachable.
        """
        try:
            info = await self._info(address, port, timeout, section="server")
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            logger.debug("run_id read from %s:%s failed: %s", address, port, e)
            return None
        return info.get("run_id")

    async def _info(
        self, address: str, port: int, timeout: float, section: str | None = None
    ) -> dict:
        client = redis.Redis(
            host=address,
            port=port,
            password=self.password,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
            decode_responses=True,
        )
        try:
            return await asyncio.wait_for(client.info(section), timeout=timeout)
        finally:
            await client.aclose()
