"""Witness bootstrap path: Announcing -> Discovering -> Configuring -> Launched."""

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from launcher_protocols import (
    Identity,
    ProcessHandoffProtocol,
    ReadinessProberProtocol,
    RegistryClientProtocol,
    Role,
)
from redis_launcher.bootstrap.base import Bootstrap, Phase, Sleep
from redis_launcher.exceptions import RegistryError
from redis_launcher.resolver import PRIMARY_SELECTOR, in_pool
from redis_launcher.sentinel_config import MonitorConfig

logger = logging.getLogger(__name__)


class WitnessBootstrap(Bootstrap):
    """
    Brings up this instance as a Sentinel witness.

    The witness exists only to supervise a primary, so discovery never gives
    up: it polls the registry for a running primary and probes it until one
    answers, with no attempt cap.

    Attributes:
        prober: Readiness prober used against discovered primaries.
        config_path: Where the monitor config is written.
        port: Port the primary listens on.
        pool_prefix: Substring identifying pool members.
        monitor: Template carrying quorum, timeouts and secret. Its address
            and port are replaced with the discovered primary.
        probe_timeout: Seconds per probe.
        retry_delay: Seconds between discovery attempts.
    """

    role = Role.WITNESS

    def __init__(
        self,
        registry: RegistryClientProtocol,
        prober: ReadinessProberProtocol,
        handoff: ProcessHandoffProtocol,
        identity: Identity,
        config_path: Path,
        port: int,
        monitor: MonitorConfig,
        pool_prefix: str = "",
        probe_timeout: float = 3.0,
        retry_delay: float = 10.0,
        sentinel_binary: str = "redis-sentinel",
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        super().__init__(registry, handoff, identity, sleep=sleep)
        self.prober = prober
        self.config_path = config_path
        self.port = port
        self.monitor = monitor
        self.pool_prefix = pool_prefix
        self.probe_timeout = probe_timeout
        self.retry_delay = retry_delay
        self.sentinel_binary = sentinel_binary
        self.attempts = 0

    async def run(self, extra_args: Sequence[str] = ()) -> None:
        await self.announce()
        logger.info("Using config file %s", self.config_path)

        master_address = await self.discover()

        self._enter(Phase.CONFIGURING)
        config = replace(
            self.monitor, master_address=master_address, master_port=self.port
        )
        config.write(self.config_path)

        self.launch(
            self.sentinel_binary,
            [str(self.config_path), "--protected-mode", "no", *extra_args],
        )

    async def discover(self) -> str:
        """
        Wait until a running primary answers a probe.

        Returns:
            The primary's address.
        """
        self._enter(Phase.DISCOVERING)
        while True:
            self.attempts += 1
            address = await self._current_primary()
            logger.info("Current primary is %s", address or "<none>")

            if address:
                if await self.prober.probe(address, self.port, self.probe_timeout):
                    return address
                logger.info("Connecting to master failed. Waiting...")

            await self.sleep(self.retry_delay)

    async def _current_primary(self) -> str | None:
        try:
            instances = await self.registry.list_instances(PRIMARY_SELECTOR)
        except RegistryError as e:
            logger.warning("Primary lookup failed, retrying: %s", e)
            return None

        primaries = in_pool(instances, self.pool_prefix)
        if len(primaries) > 1:
            logger.warning(
                "Multiple running primaries: %s; monitoring %s",
                ", ".join(p.identity for p in primaries),
                primaries[0].identity,
            )
        return primaries[0].address if primaries else None
