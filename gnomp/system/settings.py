"""dconf / gsettings settings store adapter."""

from pathlib import Path
from typing import Sequence

from ..errors import CommandError
from ..util.logging import get_logger
from .runner import CommandRunner

logger = get_logger(__name__)


def to_string_array(values: Sequence[str]) -> str:
    """Render strings as a GVariant string array literal."""
    if not values:
        return "@as []"
    quoted = []
    for value in values:
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        quoted.append(f"'{escaped}'")
    return "[" + ", ".join(quoted) + "]"


class SettingsStore:
    """Hierarchical GNOME settings database (dconf) plus schema-level gsettings access."""

    def __init__(self, runner: CommandRunner, root: str = "/"):
        self.runner = runner
        self.root = root

    def dump(self, output_path: Path) -> Path:
        """Write the whole settings tree under root to output_path."""
        logger.info("Backing up GNOME settings...")
        return self.runner.run_to_file(["dconf", "dump", self.root], output_path)

    def load(self, input_path: Path) -> None:
        """Replay a settings dump produced by dump()."""
        logger.info("Restoring dconf settings...")
        self.runner.run(["dconf", "load", self.root], input_text=input_path.read_text())

    def reset_all(self) -> None:
        """Erase every key under root so a following load starts from defaults."""
        self.runner.run(["dconf", "reset", "-f", self.root])

    def reset_recursively(self, schema: str) -> bool:
        """Reset every key of a schema to its default, ignoring failures."""
        try:
            self.runner.run(["gsettings", "reset-recursively", schema])
            return True
        except CommandError as e:
            logger.debug(f"Could not reset {schema}: {e}")
            return False

    def set_value(self, schema: str, key: str, value: str) -> None:
        """Set a key to a GVariant-formatted value."""
        self.runner.run(["gsettings", "set", schema, key, value])

    def set_enabled_extensions(self, uuids: Sequence[str]) -> None:
        """Overwrite org.gnome.shell enabled-extensions with uuids."""
        self.set_value("org.gnome.shell", "enabled-extensions", to_string_array(uuids))
