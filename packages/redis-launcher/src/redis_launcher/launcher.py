"""
Top-level launcher: side-process, role resolution, bootstrap, exit status.

Exit status is 0 whenever a bootstrap path handed off to the store (in
production the handoff replaces the process, so 0 is only observed with a
test handoff). Status 1 comes only from a replica that gave up on its
primary.
"""

import logging
from typing import Sequence

from launcher_protocols import (
    BecomePrimary,
    BecomeReplica,
    BecomeWitness,
    ElectionOutcome,
    Identity,
    RoleOverride,
    SideProcessProtocol,
)
from redis_launcher.bootstrap import PrimaryBootstrap, ReplicaBootstrap, WitnessBootstrap
from redis_launcher.exceptions import ReplicaConnectError
from redis_launcher.resolver import RoleResolver

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REPLICA_ABORTED = 1


class Launcher:
    """
    Composes resolver and bootstrap paths into the startup control flow.

    Attributes:
        identity: This instance's identity.
        override: Operator-forced role flags.
        resolver: Role resolver.
        side_process: Label updater started before anything else.
        primary, witness, replica: Bootstrap paths.
        service_host: Primary service address, if service discovery provides
            one. Replicas attach through it instead of the elected pod.
        service_port: Primary service port.

    Example:
        launcher = create_launcher(LauncherSettings())
        raise SystemExit(await launcher.run(sys.argv[1:]))
    """

    def __init__(
        self,
        identity: Identity,
        resolver: RoleResolver,
        side_process: SideProcessProtocol,
        primary: PrimaryBootstrap,
        witness: WitnessBootstrap,
        replica: ReplicaBootstrap,
        override: RoleOverride | None = None,
        service_host: str | None = None,
        service_port: int = 6379,
    ) -> None:
        self.identity = identity
        self.resolver = resolver
        self.side_process = side_process
        self.primary = primary
        self.witness = witness
        self.replica = replica
        self.override = override or RoleOverride()
        self.service_host = service_host
        self.service_port = service_port
        self.outcome: ElectionOutcome | None = None

    async def run(self, extra_args: Sequence[str] = ()) -> int:
        """
        Run the launcher to completion.

        Returns:
            Exit status: 0 after handoff, 1 if the replica path aborted.

        Raises:
            StartupOptionsError: If an options file cannot be read or written.
        """
        logger.info("Starting redis launcher for %s", self.identity)
        await self.side_process.start()

        self.outcome = await self.resolver.resolve(self.identity, self.override)

        if isinstance(self.outcome, BecomePrimary):
            logger.info("Launching in primary mode")
            await self.primary.run(extra_args)
        elif isinstance(self.outcome, BecomeWitness):
            logger.info("Launching in witness mode")
            await self.witness.run(extra_args)
        elif isinstance(self.outcome, BecomeReplica):
            target = self.replica_target(self.outcome)
            logger.info("Launching in replica mode, primary %s:%s", target, self.service_port)
            try:
                await self.replica.run(target, self.service_port, extra_args)
            except ReplicaConnectError as e:
                logger.error("%s", e)
                return EXIT_REPLICA_ABORTED

        return EXIT_OK

    def replica_target(self, outcome: BecomeReplica) -> str:
        """The service address when available, otherwise the elected peer."""
        return self.service_host or outcome.target_address
