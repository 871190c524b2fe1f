"""Live reload of GNOME Shell over D-Bus."""

from ..errors import CommandError
from ..util.logging import get_logger
from .runner import CommandRunner

logger = get_logger(__name__)

RELOAD_MESSAGE = "Restoring GNOME configuration..."


class ShellReloader:
    """Asks the running shell to restart itself via org.gnome.Shell.Eval."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def reload(self, message: str = RELOAD_MESSAGE) -> bool:
        """Trigger a shell restart; False when the IPC endpoint is unavailable."""
        script = f'Meta.restart("{message}")'
        try:
            self.runner.run([
                "busctl", "--user", "call",
                "org.gnome.Shell", "/org/gnome/Shell", "org.gnome.Shell",
                "Eval", "s", script,
            ])
            return True
        except CommandError as e:
            logger.debug(f"Shell reload failed: {e}")
            return False
