"""
Generic types for the role election protocol.

This module defines the data structures shared by the registry client,
the role resolver and the bootstrap sequencer. They describe pool
members as seen through the registry and the outcome of an election.

All types use @dataclass for simplicity. Pydantic models are reserved
for parsing registry API responses.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Type aliases for common patterns
Identity = str
"""Stable name of a pool member (the pod hostname)."""


class Role(str, Enum):
    """
    Role a pool member can assume.

    Values are the label values published to the registry, so a Role can be
    written to and parsed from the `redis-role` label directly.
    """

    PRIMARY = "master"
    REPLICA = "slave"
    WITNESS = "sentinel"
    UNASSIGNED = ""

    @classmethod
    def from_label(cls, value: str | None) -> "Role":
        """Parse a label value, mapping unknown or missing values to UNASSIGNED."""
        try:
            return cls(value or "")
        except ValueError:
            return cls.UNASSIGNED


class Liveness(str, Enum):
    """Liveness of a pool member as reported by the registry."""

    RUNNING = "Running"
    PENDING = "Pending"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Instance:
    """
    Represents one process in the pool.

    Attributes:
        identity: Stable, unique name (e.g., "redis-ha-server-0").
        address: Network address other members use to reach it. Empty when
            the registry has not assigned one yet.
        role: Role currently published to the registry.
        created_at: Creation timestamp. Used only as the election tie-break.
        liveness: Running, Pending or Unknown.
    """

    identity: Identity
    address: str
    role: Role
    created_at: datetime
    liveness: Liveness = Liveness.UNKNOWN

    @property
    def is_running(self) -> bool:
        return self.liveness is Liveness.RUNNING


@dataclass(frozen=True)
class RoleOverride:
    """
    Operator-forced role flags.

    When primary is set the instance becomes primary without consulting the
    registry; otherwise when witness is set it becomes a witness. Primary is
    checked first.
    """

    primary: bool = False
    witness: bool = False


@dataclass(frozen=True)
class BecomePrimary:
    """Election outcome: this instance is the primary."""


@dataclass(frozen=True)
class BecomeWitness:
    """Election outcome: this instance runs the failover monitor."""


@dataclass(frozen=True)
class BecomeReplica:
    """
    Election outcome: replicate from another instance.

    Attributes:
        target_address: Address of the primary (or elected peer) to follow.
        target_identity: Identity of that instance, when known.
    """

    target_address: str
    target_identity: Identity | None = None


ElectionOutcome = BecomePrimary | BecomeReplica | BecomeWitness
"""Decision computed once at startup and never revised."""
