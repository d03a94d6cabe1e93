"""Shared fakes for launcher tests.

The fakes implement the launcher_protocols interfaces in memory so the
resolver and bootstrap paths run without a cluster, a Redis server or real
sleeps.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Sequence

import pytest

from launcher_protocols import Instance, Liveness, Role
from redis_launcher.exceptions import RegistryError

BASE_TIME = datetime(2026, 1, 26, 12, 0, 0, tzinfo=timezone.utc)


class FakeRegistry:
    """
    In-memory registry.

    list_instances() filters `instances` by a single "key=value" selector.
    Queued snapshots in `scripted[selector]` are returned first, one per call,
    to simulate a registry that changes between reads. An Exception in the
    queue is raised instead of returned.
    """

    def __init__(self, instances: Iterable[Instance] = ()) -> None:
        self.instances = list(instances)
        self.scripted: dict[str, list] = {}
        self.list_calls: list[str] = []
        self.role_labels: list[tuple[str, Role]] = []
        self.labels: dict[str, dict[str, str]] = {}

    async def list_instances(self, selector: str) -> list[Instance]:
        self.list_calls.append(selector)
        queue = self.scripted.get(selector)
        if queue:
            item = queue.pop(0)
            if isinstance(item, Exception):
                raise item
            return list(item)

        if selector == "redis-role=master":
            return [i for i in self.instances if i.role is Role.PRIMARY]
        return list(self.instances)

    async def set_role_label(self, identity: str, role: Role) -> None:
        self.role_labels.append((identity, role))
        self.labels.setdefault(identity, {})["redis-role"] = role.value

    async def set_labels(self, identity: str, labels: dict[str, str]) -> None:
        self.labels.setdefault(identity, {}).update(labels)


class UnavailableRegistry:
    """Registry whose API server is down: every call raises RegistryError."""

    def __init__(self) -> None:
        self.calls = 0

    async def list_instances(self, selector: str) -> list[Instance]:
        self.calls += 1
        raise RegistryError("list pods", "apiserver unavailable")

    async def set_role_label(self, identity: str, role: Role) -> None:
        self.calls += 1
        raise RegistryError("label pod", "apiserver unavailable")

    async def set_labels(self, identity: str, labels: dict[str, str]) -> None:
        self.calls += 1
        raise RegistryError("label pod", "apiserver unavailable")


class FakeProber:
    """Prober answering from a script, then `default` once exhausted."""

    def __init__(
        self,
        results: Iterable[bool] = (),
        default: bool = False,
        reachable_on: Callable[[int], bool] | None = None,
    ) -> None:
        self.results = list(results)
        self.default = default
        self.reachable_on = reachable_on
        self.calls: list[tuple[str, int, float]] = []

    async def probe(self, address: str, port: int, timeout: float) -> bool:
        self.calls.append((address, port, timeout))
        if self.reachable_on is not None:
            return self.reachable_on(len(self.calls))
        if self.results:
            return self.results.pop(0)
        return self.default


class RecordingHandoff:
    """Records exec() calls instead of replacing the process."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str]]] = []

    def exec(self, binary: str, args: Sequence[str]) -> None:
        self.calls.append((binary, list(args)))


class FakeSideProcess:
    def __init__(self, events: list[str] | None = None) -> None:
        self.started = False
        self.terminated = False
        self.events = events if events is not None else []

    async def start(self) -> None:
        self.started = True
        self.events.append("side-process started")

    async def terminate(self) -> None:
        self.terminated = True
        self.events.append("side-process terminated")


class FakeSleep:
    """Awaitable sleep that records delays and returns immediately."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.delays)


def _address_for(identity: str) -> str:
    return f"10.0.0.{sum(map(ord, identity)) % 250 + 1}"


def make_instance(
    identity: str,
    address: str | None = None,
    created_offset: int = 0,
    role: Role = Role.UNASSIGNED,
    liveness: Liveness = Liveness.RUNNING,
) -> Instance:
    """Build an Instance created `created_offset` seconds after BASE_TIME."""
    return Instance(
        identity=identity,
        address=address if address is not None else _address_for(identity),
        role=role,
        created_at=BASE_TIME + timedelta(seconds=created_offset),
        liveness=liveness,
    )


@pytest.fixture
def instance_factory():
    """Factory for Instance objects."""
    return make_instance


@pytest.fixture
def registry():
    return FakeRegistry()


@pytest.fixture
def down_registry():
    return UnavailableRegistry()


@pytest.fixture
def handoff():
    return RecordingHandoff()


@pytest.fixture
def side_process():
    return FakeSideProcess()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def prober_factory():
    """Factory for FakeProber objects."""
    return FakeProber


@pytest.fixture
def registry_factory():
    """Factory for FakeRegistry objects."""
    return FakeRegistry
