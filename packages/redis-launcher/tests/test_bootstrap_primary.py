"""Tests for the primary bootstrap path."""

import logging

import pytest

from launcher_protocols import Role
from redis_launcher.bootstrap import Phase, PrimaryBootstrap

MASTER_CONF = """\
port 6379
# requirepass foobared
dir /redis-master-data
"""


@pytest.fixture
def master_conf(tmp_path):
    path = tmp_path / "master.conf"
    path.write_text(MASTER_CONF)
    return path


def make_primary(registry, handoff, master_conf, data_dir, secret=None):
    return PrimaryBootstrap(
        registry=registry,
        handoff=handoff,
        identity="redis-0",
        config_path=master_conf,
        data_dir=data_dir,
        secret=secret,
    )


class TestPrimaryBootstrap:
    @pytest.mark.asyncio
    async def test_labels_then_launches(self, registry, handoff, master_conf, tmp_path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        primary = make_primary(registry, handoff, master_conf, data_dir)

        await primary.run()

        assert registry.role_labels == [("redis-0", Role.PRIMARY)]
        assert handoff.calls == [
            ("redis-server", [str(master_conf), "--protected-mode", "no"])
        ]
        assert primary.history == [Phase.ANNOUNCING, Phase.PREPARING, Phase.LAUNCHED]

    @pytest.mark.asyncio
    async def test_extra_args_appended(self, registry, handoff, master_conf, tmp_path):
        primary = make_primary(registry, handoff, master_conf, tmp_path)

        await primary.run(["--appendonly", "yes"])

        _, args = handoff.calls[0]
        assert args[-2:] == ["--appendonly", "yes"]
        assert args[1:3] == ["--protected-mode", "no"]

    @pytest.mark.asyncio
    async def test_missing_data_dir_is_created_with_warning(
        self, registry, handoff, master_conf, tmp_path, caplog
    ):
        data_dir = tmp_path / "redis-master-data"
        primary = make_primary(registry, handoff, master_conf, data_dir)

        with caplog.at_level(logging.WARNING):
            await primary.run()

        assert data_dir.is_dir()
        assert "data won't be persistent" in caplog.text
        # Not fatal: still launched
        assert primary.phase is Phase.LAUNCHED

    @pytest.mark.asyncio
    async def test_secret_enables_requirepass(
        self, registry, handoff, master_conf, tmp_path
    ):
        primary = make_primary(registry, handoff, master_conf, tmp_path, secret="s3cret")

        await primary.run()

        lines = master_conf.read_text().splitlines()
        assert "requirepass s3cret" in lines
        assert lines.count("requirepass s3cret") == 1

    @pytest.mark.asyncio
    async def test_no_secret_leaves_config_untouched(
        self, registry, handoff, master_conf, tmp_path
    ):
        primary = make_primary(registry, handoff, master_conf, tmp_path)

        await primary.run()

        assert master_conf.read_text() == MASTER_CONF

    @pytest.mark.asyncio
    async def test_label_failure_still_launches(
        self, down_registry, handoff, master_conf, tmp_path, caplog
    ):
        primary = make_primary(down_registry, handoff, master_conf, tmp_path)

        with caplog.at_level(logging.WARNING):
            await primary.run()

        assert "Could not label redis-0" in caplog.text
        assert primary.phase is Phase.LAUNCHED
        assert handoff.calls == [
            ("redis-server", [str(master_conf), "--protected-mode", "no"])
        ]
