"""
Readiness prober protocol.

A prober performs a bounded-duration health check against a store
endpoint. It never raises for an unreachable target.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ReadinessProberProtocol(Protocol):
    """Protocol for store health probes."""

    async def probe(self, address: str, port: int, timeout: float) -> bool:
        """
        Check whether the store at address:port answers within timeout.

        Returns:
            True if reachable, False otherwise. Timeouts, refused connections
            and authentication failures all yield False.
        """
        ...
