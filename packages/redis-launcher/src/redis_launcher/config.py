"""Environment-based configuration for the pool role launcher."""

import os
import socket
from pathlib import Path
from typing import Mapping

from pydantic import Field
from pydantic_settings import BaseSettings

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")

DEFAULT_REDIS_PORT = 6379


class LauncherSettings(BaseSettings):
    """
    Launcher configuration.

    Settings are read from unprefixed environment variables so the names
    match what the deployment chart already sets. For example:
        MASTER=true
        SENTINEL=true
        REDIS_CHART_PREFIX=redis-ha-
        QUORUM=3
        REDIS_PASS=secret
    """

    # Operator-forced roles
    master: bool = False
    sentinel: bool = False

    # Pool identity
    redis_chart_prefix: str = ""
    hostname: str = Field(default_factory=socket.gethostname)
    pod_ip: str | None = None
    pod_namespace: str | None = None

    # Sentinel monitor settings
    quorum: int = 2
    sentinel_down_time: int = 10000  # ms
    sentinel_failover_timeout: int = 30000  # ms
    sentinel_parallel_syncs: int = 10
    sentinel_reconfig_script: str = "/usr/local/bin/promote.sh"

    # Authentication
    redis_pass: str | None = None
    redis_password_file: Path | None = None

    # Startup option files and data directory
    master_conf: Path = Path("/etc/redis/master.conf")
    slave_conf: Path = Path("/etc/redis/slave.conf")
    sentinel_conf: Path = Path("/etc/redis/sentinel.conf")
    data_dir: Path = Path("/redis-master-data")
    redis_server_bin: str = "redis-server"
    redis_sentinel_bin: str = "redis-sentinel"

    # Probing and retries
    probe_timeout_seconds: float = 3.0
    sentinel_retry_seconds: float = 10.0
    slave_max_attempts: int = 30
    slave_retry_seconds: float = 1.0

    # Registry
    kube_api_url: str = "https://kubernetes.default.svc"
    kube_token_file: Path = SERVICE_ACCOUNT_DIR / "token"
    kube_ca_file: Path = SERVICE_ACCOUNT_DIR / "ca.crt"

    # Label updater side-process
    label_updater_command: str | None = None
    label_interval_seconds: float = 10.0
    label_redis_port: int = 6379

    model_config = {"env_prefix": ""}

    def env_var_prefix(self) -> str:
        """Prefix of the service discovery variables, e.g. "redis-ha-" -> "REDIS_HA_"."""
        return self.redis_chart_prefix.upper().replace("-", "_")

    def master_service(
        self, environ: Mapping[str, str] | None = None
    ) -> tuple[str | None, int]:
        """
        Resolve the primary service address from service discovery variables.

        Kubernetes injects <SERVICE>_SERVICE_HOST and <SERVICE>_SERVICE_PORT for
        every service in the namespace. The primary service is named after the
        chart prefix, so the variable names are derived from it.

        Args:
            environ: Mapping to read from (default: os.environ).

        Returns:
            Tuple of (host or None, port). Port falls back to 6379.
        """
        env = os.environ if environ is None else environ
        prefix = self.env_var_prefix()
        host = env.get(f"{prefix}MASTER_SVC_SERVICE_HOST") or None
        port = env.get(f"{prefix}MASTER_SVC_SERVICE_PORT")
        return host, int(port) if port else DEFAULT_REDIS_PORT

    def resolve_secret(self) -> str | None:
        """
        Return the authentication secret.

        The inline REDIS_PASS value wins; otherwise the contents of
        REDIS_PASSWORD_FILE are used when the file exists.
        """
        if self.redis_pass:
            return self.redis_pass
        if self.redis_password_file and self.redis_password_file.is_file():
            return self.redis_password_file.read_text().strip() or None
        return None

    def resolve_pod_ip(self) -> str:
        """Address this pod announces to peers (like `hostname -i`)."""
        if self.pod_ip:
            return self.pod_ip
        return socket.gethostbyname(self.hostname)

    def resolve_namespace(self) -> str:
        """Namespace from POD_NAMESPACE, then the service account, then "default"."""
        if self.pod_namespace:
            return self.pod_namespace
        namespace_file = SERVICE_ACCOUNT_DIR / "namespace"
        if namespace_file.is_file():
            return namespace_file.read_text().strip()
        return "default"
