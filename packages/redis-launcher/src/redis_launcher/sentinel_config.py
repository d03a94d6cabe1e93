"""Monitor (Sentinel) configuration generation."""

from dataclasses import dataclass
from pathlib import Path

from redis_launcher.exceptions import StartupOptionsError

MASTER_NAME = "mymaster"


@dataclass(frozen=True)
class MonitorConfig:
    """
    Sentinel configuration for one witness.

    Generated once per process after the primary is confirmed reachable and
    written over any previous file.

    Attributes:
        master_address: Address of the confirmed primary.
        master_port: Port of the primary.
        quorum: Sentinels that must agree before failover starts.
        down_after_ms: Milliseconds without reply before the primary is
            considered down.
        failover_timeout_ms: Failover timeout in milliseconds.
        parallel_syncs: Replicas reconfigured at once after a failover.
        auth_pass: Secret used to authenticate to the primary, if any.
        reconfig_script: Hook run on every failover reconfiguration.
        bind: Listen address.

    Example:
        MonitorConfig("10.0.0.5", 6379, quorum=3).write(Path("/etc/redis/sentinel.conf"))
    """

    master_address: str
    master_port: int
    quorum: int = 2
    down_after_ms: int = 10000
    failover_timeout_ms: int = 30000
    parallel_syncs: int = 10
    auth_pass: str | None = None
    reconfig_script: str = "/usr/local/bin/promote.sh"
    bind: str = "0.0.0.0"

    def lines(self) -> list[str]:
        lines = [
            f"sentinel monitor {MASTER_NAME} {self.master_address} {self.master_port} {self.quorum}",
            f"sentinel down-after-milliseconds {MASTER_NAME} {self.down_after_ms}",
            f"sentinel failover-timeout {MASTER_NAME} {self.failover_timeout_ms}",
            f"sentinel parallel-syncs {MASTER_NAME} {self.parallel_syncs}",
            f"bind {self.bind}",
            f"sentinel client-reconfig-script {MASTER_NAME} {self.reconfig_script}",
        ]
        if self.auth_pass:
            lines.append(f"sentinel auth-pass {MASTER_NAME} {self.auth_pass}")
        return lines

    def render(self) -> str:
        return "\n".join(self.lines()) + "\n"

    def write(self, path: Path) -> None:
        """
        Write the config over any previous file.

        Raises:
            StartupOptionsError: If the file cannot be written.
        """
        try:
            path.write_text(self.render())
        except OSError as e:
            raise StartupOptionsError(path, str(e)) from e
