"""Shared state machine plumbing for the role bootstrap paths."""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

from launcher_protocols import (
    Identity,
    ProcessHandoffProtocol,
    RegistryClientProtocol,
    Role,
)
from redis_launcher.exceptions import RegistryError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class Phase(str, Enum):
    """Bootstrap phases. Each path visits a subset in order."""

    IDLE = "idle"
    ANNOUNCING = "announcing"
    PREPARING = "preparing"
    DISCOVERING = "discovering"
    CONNECTING = "connecting"
    CONFIGURING = "configuring"
    LAUNCHED = "launched"
    ABORTED = "aborted"


class Bootstrap:
    """
    Base class for a role bootstrap path.

    Subclasses implement run(); this class tracks the current phase and
    publishes the role label.

    Attributes:
        registry: Registry the role label is written to.
        handoff: Process handoff used for the terminal launch.
        identity: This instance's identity.
        sleep: Awaitable sleep, injectable for tests.
    """

    role: Role = Role.UNASSIGNED

    def __init__(
        self,
        registry: RegistryClientProtocol,
        handoff: ProcessHandoffProtocol,
        identity: Identity,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.registry = registry
        self.handoff = handoff
        self.identity = identity
        self.sleep = sleep
        self.phase = Phase.IDLE
        self.history: list[Phase] = []

    def _enter(self, phase: Phase) -> None:
        logger.debug("%s bootstrap: %s -> %s", self.role.name.lower(), self.phase.value, phase.value)
        self.phase = phase
        self.history.append(phase)

    async def announce(self) -> None:
        """
        Publish the role label before anything else so peers can find us.

        A registry failure is logged and the path continues unlabelled.
        """
        self._enter(Phase.ANNOUNCING)
        try:
            await self.registry.set_role_label(self.identity, self.role)
        except RegistryError as e:
            logger.warning("Could not label %s as %s: %s", self.identity, self.role.value, e)
            return
        logger.info("Labelled %s as %s", self.identity, self.role.value)

    def launch(self, binary: str, args: list[str]) -> None:
        self._enter(Phase.LAUNCHED)
        self.handoff.exec(binary, args)
