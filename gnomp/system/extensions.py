"""GNOME Shell extension manager adapter."""

import re
from typing import List, Optional

from ..errors import CommandError
from ..util.logging import get_logger
from .runner import CommandRunner

logger = get_logger(__name__)

_VERSION_RE = re.compile(r"(\d+)(?:\.(\w+))?")


def parse_shell_version(output: str) -> str:
    """Reduce `gnome-shell --version` output to major.minor (e.g. "GNOME Shell 46.2" -> "46.2")."""
    tokens = output.split()
    candidate = tokens[2] if len(tokens) >= 3 else output.strip()
    match = _VERSION_RE.search(candidate)
    if not match:
        raise ValueError(f"Unrecognised GNOME Shell version: {output!r}")
    major, minor = match.groups()
    return f"{major}.{minor}" if minor is not None else major


def parse_extension_list(text: str) -> List[str]:
    """Extension identifiers from newline-separated text, blank lines dropped."""
    return [line.strip() for line in text.splitlines() if line.strip()]


class ExtensionManager:
    """Wraps the gnome-extensions CLI."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner
        self._shell_version: Optional[str] = None

    def list_enabled(self) -> List[str]:
        """Identifiers of currently enabled extensions."""
        output = self.runner.run(["gnome-extensions", "list", "--enabled"])
        return parse_extension_list(output)

    def is_installed(self, uuid: str) -> bool:
        """Whether the extension is known to the shell."""
        return self.runner.succeeds(["gnome-extensions", "info", uuid])

    def enable(self, uuid: str) -> bool:
        """Enable an extension, reporting failure instead of raising."""
        try:
            self.runner.run(["gnome-extensions", "enable", uuid])
            return True
        except CommandError as e:
            logger.debug(f"Could not enable {uuid}: {e}")
            return False

    def shell_version(self) -> str:
        """Installed GNOME Shell version as major.minor."""
        if self._shell_version is None:
            output = self.runner.run(["gnome-shell", "--version"])
            self._shell_version = parse_shell_version(output)
        return self._shell_version
