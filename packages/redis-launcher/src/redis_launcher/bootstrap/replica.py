"""Replica bootstrap path.

Announcing -> Preparing -> Connecting(attempt) -> {Configuring | Aborted} -> Launched

The only path that gives up: after max_attempts failed probes it stops the
label updater and raises ReplicaConnectError, which the launcher turns into
exit status 1 so the pod is restarted.
"""

import asyncio
import logging
from pathlib import Path
from typing import Sequence

from launcher_protocols import (
    Identity,
    ProcessHandoffProtocol,
    ReadinessProberProtocol,
    RegistryClientProtocol,
    Role,
    SideProcessProtocol,
)
from redis_launcher.bootstrap.base import Bootstrap, Phase, Sleep
from redis_launcher.exceptions import ReplicaConnectError
from redis_launcher.startup_options import StartupOptions, ensure_data_dir

logger = logging.getLogger(__name__)


class ReplicaBootstrap(Bootstrap):
    """
    Brings up this instance as a replica of a given primary.

    Attributes:
        prober: Readiness prober used against the target.
        side_process: Label updater, stopped on abort.
        config_path: Replica startup-options file.
        data_dir: Data directory, created if missing.
        announce_ip: Address peers should use to reach this replica.
        secret: Authentication secret, or None.
        max_attempts: Probe attempts before giving up (default 30).
        retry_delay: Seconds between attempts (default 1).
        probe_timeout: Seconds per probe.
    """

    role = Role.REPLICA

    def __init__(
        self,
        registry: RegistryClientProtocol,
        prober: ReadinessProberProtocol,
        handoff: ProcessHandoffProtocol,
        side_process: SideProcessProtocol,
        identity: Identity,
        config_path: Path,
        data_dir: Path,
        announce_ip: str,
        secret: str | None = None,
        max_attempts: int = 30,
        retry_delay: float = 1.0,
        probe_timeout: float = 3.0,
        server_binary: str = "redis-server",
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        super().__init__(registry, handoff, identity, sleep=sleep)
        self.prober = prober
        self.side_process = side_process
        self.config_path = config_path
        self.data_dir = data_dir
        self.announce_ip = announce_ip
        self.secret = secret
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.probe_timeout = probe_timeout
        self.server_binary = server_binary
        self.attempts = 0

    async def run(
        self, target_address: str, target_port: int, extra_args: Sequence[str] = ()
    ) -> None:
        """
        Attach to the primary at target_address:target_port and launch.

        Raises:
            ReplicaConnectError: If the primary never answered.
        """
        await self.announce()

        self._enter(Phase.PREPARING)
        logger.info("Using config file %s", self.config_path)
        ensure_data_dir(self.data_dir)

        await self.connect(target_address, target_port)

        self._enter(Phase.CONFIGURING)
        options = StartupOptions.load(self.config_path)
        if self.secret:
            options.enable("masterauth", self.secret)
            options.enable("requirepass", self.secret)
        options.fill("master-ip", target_address)
        options.fill("master-port", str(target_port))
        options.save()

        self.launch(
            self.server_binary,
            [
                str(self.config_path),
                "--slave-announce-ip",
                self.announce_ip,
                "--protected-mode",
                "no",
                *extra_args,
            ],
        )

    async def connect(self, address: str, port: int) -> None:
        """
        Probe the primary once per retry_delay, at most max_attempts times.

        Raises:
            ReplicaConnectError: After max_attempts failed probes.
        """
        self._enter(Phase.CONNECTING)
        for attempt in range(1, self.max_attempts + 1):
            self.attempts = attempt
            if await self.prober.probe(address, port, self.probe_timeout):
                logger.info("Primary %s:%s reachable (attempt %d)", address, port, attempt)
                return
            if attempt == self.max_attempts:
                break
            logger.info(
                "Connecting to primary failed (attempt %d/%d). Waiting...",
                attempt,
                self.max_attempts,
            )
            await self.sleep(self.retry_delay)

        self._enter(Phase.ABORTED)
        logger.error("Exiting after too many attempts")
        await self.side_process.terminate()
        raise ReplicaConnectError(f"{address}:{port}", self.attempts)
