"""
Role resolution for a freshly started pool member.

The resolver decides whether this instance becomes the primary, a replica
or a witness. Operator-forced roles short-circuit the registry. Otherwise
the registry is searched for a running primary, and if there is none every
member runs the same bootstrap election over the same snapshot:

    candidates = running pool members
    winner     = min(candidates, key=(created_at, identity))

Because the key is a strict total order (identities are unique), every
member that sees the same snapshot picks the same winner without talking
to its peers. Members that lose follow the winner as replicas; the winner
takes the primary role when it runs the same check.

Known race: members that read an empty registry during warm-up all fall
back to self-election. The resulting extra primaries are logged but not
resolved here; the store's failover engine converges them.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from launcher_protocols import (
    BecomePrimary,
    BecomeReplica,
    BecomeWitness,
    ElectionOutcome,
    Identity,
    Instance,
    RegistryClientProtocol,
    RoleOverride,
)
from redis_launcher.exceptions import RegistryError

logger = logging.getLogger(__name__)

PRIMARY_SELECTOR = "redis-role=master"
POOL_SELECTOR = "redis-node=true"


def election_key(instance: Instance) -> tuple[datetime, Identity]:
    """Ordering key for the bootstrap election: creation time, then identity."""
    return (instance.created_at, instance.identity)


def in_pool(instances: Iterable[Instance], pool_prefix: str) -> list[Instance]:
    """Running, addressable instances whose identity carries the pool prefix."""
    return [
        i
        for i in instances
        if i.is_running and i.address and pool_prefix in i.identity
    ]


def elect(candidates: Iterable[Instance]) -> Instance | None:
    """
    Pick the bootstrap winner from a snapshot.

    Args:
        candidates: Pool members. Members not observed Running are ignored.

    Returns:
        The running member with the smallest election key, or None when no
        member is running.
    """
    running = [c for c in candidates if c.is_running]
    if not running:
        return None
    return min(running, key=election_key)


def decide(
    local_identity: Identity,
    primaries: list[Instance],
    members: list[Instance],
) -> ElectionOutcome:
    """
    Compute the outcome from registry snapshots.

    Pure function of its inputs. `primaries` and `members` must already be
    filtered to running pool members.
    """
    if primaries:
        return BecomeReplica(
            target_address=primaries[0].address,
            target_identity=primaries[0].identity,
        )

    winner = elect(members)
    if winner is None or winner.identity == local_identity:
        return BecomePrimary()
    return BecomeReplica(target_address=winner.address, target_identity=winner.identity)


@dataclass
class RoleResolver:
    """
    Resolves the role of the local instance.

    Attributes:
        registry: Registry client used for snapshots.
        pool_prefix: Substring that identifies pool members by name.

    Example:
        resolver = RoleResolver(registry=kube_client, pool_prefix="redis-ha-")
        outcome = await resolver.resolve("redis-ha-server-1", RoleOverride())
    """

    registry: RegistryClientProtocol
    pool_prefix: str = ""

    async def running_primaries(self) -> list[Instance]:
        """Pool members currently labelled primary and observed running."""
        return in_pool(await self._list(PRIMARY_SELECTOR), self.pool_prefix)

    async def _list(self, selector: str) -> list[Instance]:
        # An unreadable registry reads as empty so the fallback still applies
        try:
            return await self.registry.list_instances(selector)
        except RegistryError as e:
            logger.warning("Registry lookup %r failed, treating as empty: %s", selector, e)
            return []

    async def resolve(
        self,
        local_identity: Identity,
        override: RoleOverride | None = None,
    ) -> ElectionOutcome:
        """
        Decide the role of local_identity.

        Args:
            local_identity: This instance's identity.
            override: Operator-forced role flags, if any.

        Returns:
            BecomePrimary, BecomeWitness or BecomeReplica(target).

        Registry failures are logged and read as empty snapshots.
        """
        override = override or RoleOverride()
        if override.primary:
            logger.info("Launching in primary mode (forced)")
            return BecomePrimary()
        if override.witness:
            logger.info("Launching in witness mode (forced)")
            return BecomeWitness()

        logger.info("Looking for pods running as primary")
        primaries = await self.running_primaries()
        members: list[Instance] = []

        if primaries:
            logger.info(
                "Found primaries: %s",
                ", ".join(f"{p.identity} {p.address}" for p in primaries),
            )
            if len(primaries) > 1:
                logger.warning(
                    "Multiple running primaries (%d); following %s",
                    len(primaries),
                    primaries[0].identity,
                )
        else:
            logger.info("No primaries found, electing first primary")
            members = in_pool(
                await self._list(POOL_SELECTOR), self.pool_prefix
            )
            if not members:
                logger.warning(
                    "No running pool members visible in registry; "
                    "falling back to self-election"
                )

        outcome = decide(local_identity, primaries, members)
        if isinstance(outcome, BecomePrimary):
            logger.info("Taking primary role")
        elif not primaries:
            logger.info("Electing %s primary", outcome.target_identity)
        return outcome
