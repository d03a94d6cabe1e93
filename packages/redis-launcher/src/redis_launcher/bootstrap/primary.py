"""Primary bootstrap path: Announcing -> Preparing -> Launched."""

import logging
from pathlib import Path
from typing import Sequence

from launcher_protocols import (
    Identity,
    ProcessHandoffProtocol,
    RegistryClientProtocol,
    Role,
)
from redis_launcher.bootstrap.base import Bootstrap, Phase
from redis_launcher.startup_options import StartupOptions, ensure_data_dir

logger = logging.getLogger(__name__)


class PrimaryBootstrap(Bootstrap):
    """
    Brings up this instance as the primary.

    Never waits on anything: the label is written first so witnesses and
    replicas can discover the primary while the store is still starting.
    """

    role = Role.PRIMARY

    def __init__(
        self,
        registry: RegistryClientProtocol,
        handoff: ProcessHandoffProtocol,
        identity: Identity,
        config_path: Path,
        data_dir: Path,
        secret: str | None = None,
        server_binary: str = "redis-server",
    ) -> None:
        super().__init__(registry, handoff, identity)
        self.config_path = config_path
        self.data_dir = data_dir
        self.secret = secret
        self.server_binary = server_binary

    async def run(self, extra_args: Sequence[str] = ()) -> None:
        await self.announce()

        self._enter(Phase.PREPARING)
        logger.info("Using config file %s", self.config_path)
        ensure_data_dir(self.data_dir)
        if self.secret:
            options = StartupOptions.load(self.config_path)
            options.enable("requirepass", self.secret)
            options.save()

        self.launch(
            self.server_binary,
            [str(self.config_path), "--protected-mode", "no", *extra_args],
        )
