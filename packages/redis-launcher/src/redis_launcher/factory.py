"""
Factory functions that wire settings into launcher components.

The CLI builds everything through these functions, and tests can inject an
httpx client or replace any component afterwards.
"""

import shlex

import httpx

from launcher_protocols import RoleOverride
from redis_launcher.bootstrap import PrimaryBootstrap, ReplicaBootstrap, WitnessBootstrap
from redis_launcher.config import LauncherSettings
from redis_launcher.kube_client import KubeRegistryClient, create_kube_http_client
from redis_launcher.labeler import LabelUpdater
from redis_launcher.launcher import Launcher
from redis_launcher.process import ExecHandoff, LabelUpdaterProcess
from redis_launcher.redis_probe import RedisProber
from redis_launcher.resolver import RoleResolver
from redis_launcher.sentinel_config import MonitorConfig


def create_registry(
    settings: LauncherSettings,
    http: httpx.AsyncClient | None = None,
) -> KubeRegistryClient:
    """
    Create the Kubernetes registry client.

    Args:
        settings: Launcher settings.
        http: Optional pre-configured httpx client. If None, one is created
            from the in-cluster service account.
    """
    if http is None:
        http = create_kube_http_client(
            settings.kube_api_url, settings.kube_token_file, settings.kube_ca_file
        )
    return KubeRegistryClient(http=http, namespace=settings.resolve_namespace())


def create_monitor_template(settings: LauncherSettings) -> MonitorConfig:
    """Monitor settings with the primary address left blank."""
    return MonitorConfig(
        master_address="",
        master_port=0,
        quorum=settings.quorum,
        down_after_ms=settings.sentinel_down_time,
        failover_timeout_ms=settings.sentinel_failover_timeout,
        parallel_syncs=settings.sentinel_parallel_syncs,
        auth_pass=settings.resolve_secret(),
        reconfig_script=settings.sentinel_reconfig_script,
    )


def create_launcher(
    settings: LauncherSettings,
    http: httpx.AsyncClient | None = None,
) -> Launcher:
    """
    Create a fully wired Launcher.

    Example:
        launcher = create_launcher(LauncherSettings())
        status = await launcher.run(["--appendonly", "yes"])
    """
    registry = create_registry(settings, http)
    secret = settings.resolve_secret()
    prober = RedisProber(password=secret)
    handoff = ExecHandoff()
    service_host, service_port = settings.master_service()

    command = (
        shlex.split(settings.label_updater_command)
        if settings.label_updater_command
        else None
    )
    side_process = LabelUpdaterProcess(command)

    primary = PrimaryBootstrap(
        registry=registry,
        handoff=handoff,
        identity=settings.hostname,
        config_path=settings.master_conf,
        data_dir=settings.data_dir,
        secret=secret,
        server_binary=settings.redis_server_bin,
    )
    witness = WitnessBootstrap(
        registry=registry,
        prober=prober,
        handoff=handoff,
        identity=settings.hostname,
        config_path=settings.sentinel_conf,
        port=service_port,
        monitor=create_monitor_template(settings),
        pool_prefix=settings.redis_chart_prefix,
        probe_timeout=settings.probe_timeout_seconds,
        retry_delay=settings.sentinel_retry_seconds,
        sentinel_binary=settings.redis_sentinel_bin,
    )
    replica = ReplicaBootstrap(
        registry=registry,
        prober=prober,
        handoff=handoff,
        side_process=side_process,
        identity=settings.hostname,
        config_path=settings.slave_conf,
        data_dir=settings.data_dir,
        announce_ip=settings.resolve_pod_ip(),
        secret=secret,
        max_attempts=settings.slave_max_attempts,
        retry_delay=settings.slave_retry_seconds,
        probe_timeout=settings.probe_timeout_seconds,
        server_binary=settings.redis_server_bin,
    )

    return Launcher(
        identity=settings.hostname,
        resolver=RoleResolver(registry=registry, pool_prefix=settings.redis_chart_prefix),
        side_process=side_process,
        primary=primary,
        witness=witness,
        replica=replica,
        override=RoleOverride(primary=settings.master, witness=settings.sentinel),
        service_host=service_host,
        service_port=service_port,
    )


def create_label_updater(
    settings: LauncherSettings,
    http: httpx.AsyncClient | None = None,
) -> LabelUpdater:
    """Create the label updater run by the side-process."""
    return LabelUpdater(
        registry=create_registry(settings, http),
        prober=RedisProber(password=settings.resolve_secret()),
        identity=settings.hostname,
        pod_ip=settings.resolve_pod_ip(),
        port=settings.label_redis_port,
        interval=settings.label_interval_seconds,
        probe_timeout=settings.probe_timeout_seconds,
    )
