"""
Process protocols for the store handoff and the label side-process.
"""

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class ProcessHandoffProtocol(Protocol):
    """
    Protocol for handing control to the store binary.

    Production implementations replace the current process and never
    return on success. Test doubles record the call and return.
    """

    def exec(self, binary: str, args: Sequence[str]) -> None:
        """Run binary with args in place of the current process."""
        ...


@runtime_checkable
class SideProcessProtocol(Protocol):
    """Protocol for the fire-and-forget label-publishing process."""

    async def start(self) -> None:
        """Start the process without waiting for it."""
        ...

    async def terminate(self) -> None:
        """Stop the process if it is running."""
        ...
