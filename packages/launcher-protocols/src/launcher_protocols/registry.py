"""
Registry client protocol.

The RegistryClientProtocol defines the interface to the shared, eventually
consistent directory of pool members. The Kubernetes API is the production
implementation; tests use in-memory fakes.
"""

from typing import Protocol, runtime_checkable

from launcher_protocols.types import Identity, Instance, Role


@runtime_checkable
class RegistryClientProtocol(Protocol):
    """
    Protocol for registry access.

    Results of list_instances() may be stale or incomplete. Callers must not
    assume that a write is visible to the next read.
    """

    async def list_instances(self, selector: str) -> list[Instance]:
        """
        List pool members matching a label selector.

        Args:
            selector: Label selector, e.g. "redis-role=master".

        Returns:
            Instances in registry order. May be empty.
        """
        ...

    async def set_role_label(self, identity: Identity, role: Role) -> None:
        """Publish the role label for one instance, overwriting any previous value."""
        ...

    async def set_labels(self, identity: Identity, labels: dict[str, str]) -> None:
        """Publish arbitrary labels for one instance."""
        ...
