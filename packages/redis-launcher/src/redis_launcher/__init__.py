"""
Role election and bootstrap for a Redis pool on Kubernetes.

Every pod in the pool runs the same launcher. It decides whether the pod
becomes the primary, a replica or a Sentinel witness, publishes that role as
a pod label, waits for whatever the role depends on and then replaces itself
with redis-server or redis-sentinel. It includes:

- RoleResolver: Operator overrides and the deterministic bootstrap election
- PrimaryBootstrap, WitnessBootstrap, ReplicaBootstrap: Per-role state machines
- Launcher: Top-level control flow and exit status
- KubeRegistryClient: Pod listing and labelling via the Kubernetes API
- RedisProber: Bounded-timeout INFO probe
- LabelUpdater: podIP / runID label side-process
- Factory functions for CLI integration
"""

from redis_launcher.bootstrap import (
    Phase,
    PrimaryBootstrap,
    ReplicaBootstrap,
    WitnessBootstrap,
)
from redis_launcher.config import LauncherSettings
from redis_launcher.exceptions import (
    LauncherError,
    RegistryError,
    ReplicaConnectError,
    StartupOptionsError,
)
from redis_launcher.factory import create_label_updater, create_launcher
from redis_launcher.kube_client import KubeRegistryClient
from redis_launcher.labeler import LabelUpdater
from redis_launcher.launcher import Launcher
from redis_launcher.redis_probe import RedisProber
from redis_launcher.resolver import RoleResolver, decide, elect
from redis_launcher.sentinel_config import MonitorConfig

__all__ = [
    # Control flow
    "Launcher",
    "RoleResolver",
    "elect",
    "decide",
    # Bootstrap paths
    "Phase",
    "PrimaryBootstrap",
    "ReplicaBootstrap",
    "WitnessBootstrap",
    # Clients
    "KubeRegistryClient",
    "RedisProber",
    "LabelUpdater",
    # Config
    "LauncherSettings",
    "MonitorConfig",
    # Factory
    "create_launcher",
    "create_label_updater",
    # Errors
    "LauncherError",
    "RegistryError",
    "ReplicaConnectError",
    "StartupOptionsError",
]
