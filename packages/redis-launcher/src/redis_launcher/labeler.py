"""Publishes podIP and runID labels for the local store.

runID is the first eight characters of the server's run_id, which changes on
every store restart, so peers and operators can tell restarted pods apart.
The loop repeats forever; it is the launcher's side-process.
"""

import asyncio
import logging

from launcher_protocols import Identity, RegistryClientProtocol
from redis_launcher.bootstrap.base import Sleep
from redis_launcher.exceptions import RegistryError
from redis_launcher.redis_probe import RedisProber

logger = logging.getLogger(__name__)

RUN_ID_LENGTH = 8


class LabelUpdater:
    """
    Keeps this pod's identity labels current.

    Attributes:
        registry: Registry the labels are written to.
        prober: Prober used to read run_id from the local store.
        identity: This pod's identity.
        pod_ip: Address published as podIP.
        port: Local store port.
        interval: Seconds between updates.
    """

    def __init__(
        self,
        registry: RegistryClientProtocol,
        prober: RedisProber,
        identity: Identity,
        pod_ip: str,
        port: int = 6379,
        interval: float = 10.0,
        probe_timeout: float = 3.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.registry = registry
        self.prober = prober
        self.identity = identity
        self.pod_ip = pod_ip
        self.port = port
        self.interval = interval
        self.probe_timeout = probe_timeout
        self.sleep = sleep
        self._published: dict[str, str] = {}

    async def update_once(self) -> bool:
        """
        Publish labels if the local store is up and they changed.

        Returns:
            True if the labels are current after this call.
        """
        run_id = await self.prober.run_id("127.0.0.1", self.port, self.probe_timeout)
        if not run_id:
            logger.debug("Local store not answering yet")
            return False

        labels = {"podIP": self.pod_ip, "runID": run_id[:RUN_ID_LENGTH]}
        if labels == self._published:
            return True

        try:
            await self.registry.set_labels(self.identity, labels)
        except RegistryError as e:
            logger.warning("Label update failed, retrying: %s", e)
            return False

        logger.info("Published labels %s", labels)
        self._published = labels
        return True

    async def run(self) -> None:
        """Update labels every interval until cancelled."""
        while True:
            await self.update_once()
            await self.sleep(self.interval)
