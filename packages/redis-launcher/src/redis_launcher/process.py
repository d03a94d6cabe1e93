"""Process handoff to the store binary and the label updater side-process.

ExecHandoff replaces the launcher with redis-server or redis-sentinel, so the
store runs as the container's main process. LabelUpdaterProcess runs the
label updater as a separate OS process that outlives that replacement.

All commands use argument arrays. Never use shell=True.
"""

import asyncio
import logging
import os
import shlex
import sys
from typing import Sequence

logger = logging.getLogger(__name__)


class ExecHandoff:
    """Hands control to the store binary via exec. Does not return on success."""

    def exec(self, binary: str, args: Sequence[str]) -> None:
        argv = [binary, *args]
        logger.info("Executing %s", shlex.join(argv))
        # exec skips interpreter shutdown, so flush log handlers first
        for handler in logging.getLogger().handlers:
            handler.flush()
        sys.stdout.flush()
        sys.stderr.flush()
        os.execvp(binary, argv)


def default_label_updater_command() -> list[str]:
    """Run the label updater from this same installation."""
    return [sys.executable, "-m", "redis_launcher", "label-updater"]


class LabelUpdaterProcess:
    """
    Fire-and-forget label updater child process.

    Attributes:
        command: Argument array to run.
        graceful_timeout: Seconds to wait after SIGTERM before SIGKILL.
    """

    def __init__(
        self,
        command: Sequence[str] | None = None,
        graceful_timeout: float = 5.0,
    ) -> None:
        self.command = list(command) if command else default_label_updater_command()
        self.graceful_timeout = graceful_timeout
        self._proc: asyncio.subprocess.Process | None = None

    @property
    def pid(self) -> int | None:
        return self._proc.pid if self._proc else None

    async def start(self) -> None:
        """Start the updater without waiting for it."""
        self._proc = await asyncio.create_subprocess_exec(*self.command)
        logger.info("Started label updater (pid %d)", self._proc.pid)

    async def terminate(self) -> None:
        """
        Stop the updater: SIGTERM, then SIGKILL after graceful_timeout.

        No-op if it was never started or has already exited.
        """
        proc = self._proc
        if proc is None or proc.returncode is not None:
            return

        logger.info("Stopping label updater (pid %d)", proc.pid)
        try:
            proc.terminate()
        except ProcessLookupError:
            return

        try:
            await asyncio.wait_for(proc.wait(), timeout=self.graceful_timeout)
        except asyncio.TimeoutError:
            logger.warning("Label updater ignored SIGTERM, killing")
            proc.kill()
            await proc.wait()
