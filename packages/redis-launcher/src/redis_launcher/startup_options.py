"""
In-place edits of the store's startup-options files.

The option files ship with the image and keep optional directives commented
out (e.g. "# requirepass foobared") and the replication target as
placeholders ("%master-ip%", "%master-port%"). The launcher only switches
directives on and fills placeholders; it never generates these files.
"""

import logging
import re
from pathlib import Path

from redis_launcher.exceptions import StartupOptionsError

logger = logging.getLogger(__name__)


class StartupOptions:
    """
    Text of one startup-options file with edit helpers.

    Example:
        options = StartupOptions.load(Path("/etc/redis/slave.conf"))
        options.enable("masterauth", "secret")
        options.fill("master-ip", "10.0.0.5")
        options.save()
    """

    def __init__(self, path: Path, text: str) -> None:
        self.path = path
        self.text = text

    @classmethod
    def load(cls, path: Path) -> "StartupOptions":
        """
        Read an options file.

        Raises:
            StartupOptionsError: If the file cannot be read.
        """
        try:
            return cls(path, path.read_text())
        except OSError as e:
            raise StartupOptionsError(path, str(e)) from e

    def enable(self, directive: str, value: str) -> None:
        """
        Switch on a directive with the given value.

        A commented-out "# directive" line gets the active directive inserted
        above it and the comment line is kept. If the template has no such
        line the directive is appended.
        """
        pattern = re.compile(rf"^# {re.escape(directive)}(?=\s|$)", re.MULTILINE)
        if pattern.search(self.text):
            self.text = pattern.sub(
                lambda _: f"{directive} {value}\n# {directive}", self.text, count=1
            )
        else:
            if self.text and not self.text.endswith("\n"):
                self.text += "\n"
            self.text += f"{directive} {value}\n"

    def fill(self, placeholder: str, value: str) -> None:
        """Replace every %placeholder% with value."""
        token = f"%{placeholder}%"
        if token not in self.text:
            logger.warning("Placeholder %s not found in %s", token, self.path)
        self.text = self.text.replace(token, value)

    def save(self) -> None:
        """
        Write the edited text back.

        Raises:
            StartupOptionsError: If the file cannot be written.
        """
        try:
            self.path.write_text(self.text)
        except OSError as e:
            raise StartupOptionsError(self.path, str(e)) from e


def ensure_data_dir(data_dir: Path) -> bool:
    """
    Create the data directory if it is missing.

    A missing directory means no volume is mounted, so data will not survive
    a restart. That is logged as a warning, not treated as fatal.

    Returns:
        True if the directory already existed.
    """
    if data_dir.exists():
        return True
    logger.warning("Data directory %s doesn't exist, data won't be persistent!", data_dir)
    data_dir.mkdir(parents=True)
    return False
