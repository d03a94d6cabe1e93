"""Tests for the witness (Sentinel) bootstrap path."""

from unittest.mock import AsyncMock

import pytest

from launcher_protocols import Liveness, Role
from redis_launcher.bootstrap import Phase, WitnessBootstrap
from redis_launcher.exceptions import RegistryError
from redis_launcher.sentinel_config import MonitorConfig


def make_witness(registry, prober, handoff, sleep, config_path, **monitor):
    return WitnessBootstrap(
        registry=registry,
        prober=prober,
        handoff=handoff,
        identity="sentinel-0",
        config_path=config_path,
        port=6379,
        monitor=MonitorConfig(master_address="", master_port=0, **monitor),
        sleep=sleep,
    )


@pytest.fixture
def primary_registry(registry_factory, instance_factory):
    return registry_factory([instance_factory("redis-0", "10.0.0.10", role=Role.PRIMARY)])


class TestWitnessDiscovery:
    @pytest.mark.asyncio
    async def test_reachable_primary_on_first_probe(
        self, primary_registry, prober_factory, handoff, fake_sleep, tmp_path
    ):
        conf = tmp_path / "sentinel.conf"
        prober = prober_factory([True])
        witness = make_witness(primary_registry, prober, handoff, fake_sleep, conf)

        await witness.run()

        assert primary_registry.role_labels == [("sentinel-0", Role.WITNESS)]
        assert prober.calls == [("10.0.0.10", 6379, 3.0)]
        assert fake_sleep.delays == []
        assert witness.history == [
            Phase.ANNOUNCING,
            Phase.DISCOVERING,
            Phase.CONFIGURING,
            Phase.LAUNCHED,
        ]
        assert handoff.calls == [
            ("redis-sentinel", [str(conf), "--protected-mode", "no"])
        ]

    @pytest.mark.parametrize("k", [2, 31, 500])
    @pytest.mark.asyncio
    async def test_never_gives_up_before_kth_probe(
        self, primary_registry, prober_factory, handoff, fake_sleep, tmp_path, k
    ):
        prober = prober_factory(reachable_on=lambda n: n >= k)
        witness = make_witness(
            primary_registry, prober, handoff, fake_sleep, tmp_path / "sentinel.conf"
        )

        await witness.run()

        assert len(prober.calls) == k
        assert fake_sleep.delays == [10.0] * (k - 1)
        assert Phase.CONFIGURING in witness.history
        assert witness.phase is Phase.LAUNCHED

    @pytest.mark.asyncio
    async def test_waits_for_primary_to_appear(
        self, registry, prober_factory, handoff, fake_sleep, tmp_path, instance_factory
    ):
        primary = instance_factory("redis-0", "10.0.0.10", role=Role.PRIMARY)
        registry.scripted["redis-role=master"] = [
            [],
            [instance_factory("redis-0", "10.0.0.10", 0, Role.PRIMARY, Liveness.PENDING)],
            RegistryError("list pods", "connection refused"),
            [primary],
        ]
        prober = prober_factory([True])
        witness = make_witness(
            registry, prober, handoff, fake_sleep, tmp_path / "sentinel.conf"
        )

        await witness.run()

        # Only the running primary is ever probed
        assert prober.calls == [("10.0.0.10", 6379, 3.0)]
        assert fake_sleep.delays == [10.0, 10.0, 10.0]
        assert witness.attempts == 4


class TestWitnessConfig:
    @pytest.mark.asyncio
    async def test_writes_monitor_config_for_discovered_primary(
        self, primary_registry, prober_factory, handoff, fake_sleep, tmp_path
    ):
        conf = tmp_path / "sentinel.conf"
        conf.write_text("stale content\n")
        witness = make_witness(
            primary_registry,
            prober_factory([True]),
            handoff,
            fake_sleep,
            conf,
            quorum=3,
            down_after_ms=5000,
            auth_pass="x",
        )

        await witness.run()

        lines = conf.read_text().splitlines()
        assert "stale content" not in lines
        assert "sentinel monitor mymaster 10.0.0.10 6379 3" in lines
        assert "sentinel down-after-milliseconds mymaster 5000" in lines
        assert "sentinel failover-timeout mymaster 30000" in lines
        assert "sentinel parallel-syncs mymaster 10" in lines
        assert "sentinel auth-pass mymaster x" in lines
        assert "bind 0.0.0.0" in lines

    @pytest.mark.asyncio
    async def test_label_failure_does_not_stop_discovery(
        self, primary_registry, prober_factory, handoff, fake_sleep, tmp_path
    ):
        primary_registry.set_role_label = AsyncMock(
            side_effect=RegistryError("label pod", "apiserver unavailable")
        )
        witness = make_witness(
            primary_registry, prober_factory([True]), handoff, fake_sleep,
            tmp_path / "sentinel.conf",
        )

        await witness.run()

        assert witness.phase is Phase.LAUNCHED
        assert handoff.calls[0][0] == "redis-sentinel"

    @pytest.mark.asyncio
    async def test_addressless_primary_not_probed(
        self, registry, prober_factory, handoff, fake_sleep, tmp_path, instance_factory
    ):
        registry.scripted["redis-role=master"] = [
            [instance_factory("redis-0", "", role=Role.PRIMARY)],
            [instance_factory("redis-0", "10.0.0.10", role=Role.PRIMARY)],
        ]
        prober = prober_factory([True])
        witness = make_witness(
            registry, prober, handoff, fake_sleep, tmp_path / "sentinel.conf"
        )

        await witness.run()

        assert prober.calls == [("10.0.0.10", 6379, 3.0)]
        assert fake_sleep.delays == [10.0]
