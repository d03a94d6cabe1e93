"""
Protocol definitions for the pool role launcher.

This package provides the interfaces the role resolver and bootstrap
sequencer depend on. It has zero dependencies on other launcher packages.

Key protocols:
- RegistryClientProtocol: Interface to the shared instance registry
- ReadinessProberProtocol: Interface for bounded store health probes
- ProcessHandoffProtocol: Interface for replacing the process with the store
- SideProcessProtocol: Interface for the label-publishing side-process

Key types:
- Instance: A pool member as seen through the registry
- Role, Liveness: Enumerations carried by Instance
- RoleOverride: Operator-forced role flags
- BecomePrimary, BecomeReplica, BecomeWitness: Election outcomes
"""

from launcher_protocols.probe import ReadinessProberProtocol
from launcher_protocols.process import ProcessHandoffProtocol, SideProcessProtocol
from launcher_protocols.registry import RegistryClientProtocol
from launcher_protocols.types import (
    BecomePrimary,
    BecomeReplica,
    BecomeWitness,
    ElectionOutcome,
    Identity,
    Instance,
    Liveness,
    Role,
    RoleOverride,
)

__all__ = [
    # Protocols
    "RegistryClientProtocol",
    "ReadinessProberProtocol",
    "ProcessHandoffProtocol",
    "SideProcessProtocol",
    # Data types
    "Instance",
    "Identity",
    "Role",
    "Liveness",
    "RoleOverride",
    "ElectionOutcome",
    "BecomePrimary",
    "BecomeReplica",
    "BecomeWitness",
]
