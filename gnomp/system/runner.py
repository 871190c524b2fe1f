"""External command execution utilities."""

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import CommandError
from ..util.logging import get_logger

logger = get_logger(__name__)


class CommandRunner:
    """Runs external programs and turns their failures into CommandError."""

    def __init__(self, timeout: int = 120, privilege_command: Optional[Sequence[str]] = None):
        self.timeout = timeout
        self.privilege_command = list(privilege_command) if privilege_command is not None else ["sudo"]

    def run(
        self,
        command: Sequence[str],
        input_text: Optional[str] = None,
        privileged: bool = False,
        timeout: Optional[int] = None,
    ) -> str:
        """Run a command and return its stripped stdout.

        Args:
            command: Program and arguments
            input_text: Text fed to the command's stdin
            privileged: Prefix the command with the privilege command (sudo)
            timeout: Override of the default timeout in seconds

        Returns:
            Command output

        Raises:
            CommandError: If the command fails, times out or is missing
        """
        cmd = list(command)
        if privileged:
            cmd = self.privilege_command + cmd
        timeout = timeout or self.timeout

        try:
            logger.debug(f"Running command: {' '.join(cmd)}")
            result = subprocess.run(
                cmd,
                input=input_text,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=True
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            error_msg = f"Command failed: {' '.join(cmd)}\nError: {(e.stderr or '').strip()}"
            logger.debug(error_msg)
            raise CommandError(error_msg, cmd=cmd, returncode=e.returncode, stderr=e.stderr or "") from e
        except subprocess.TimeoutExpired as e:
            error_msg = f"Command timed out after {timeout}s: {' '.join(cmd)}"
            logger.debug(error_msg)
            raise CommandError(error_msg, cmd=cmd) from e
        except FileNotFoundError as e:
            error_msg = f"Command not found: {cmd[0]}"
            logger.debug(error_msg)
            raise CommandError(error_msg, cmd=cmd) from e

    def run_to_file(self, command: Sequence[str], output_path: Path) -> Path:
        """Run a command and write its stdout to a file."""
        output = self.run(command)
        output_path.write_text(output + "\n" if output else "")
        return output_path

    def succeeds(self, command: Sequence[str], privileged: bool = False) -> bool:
        """Run a command, reporting only whether it exited successfully."""
        try:
            self.run(command, privileged=privileged)
            return True
        except CommandError:
            return False

    def copy_privileged(self, source: Path, destination: Path) -> bool:
        """Recursive copy with elevated privileges (sudo cp -rT).

        Missing sources are skipped quietly, other failures are logged.
        """
        # -T copies source onto destination instead of nesting it inside
        if not source.exists():
            logger.debug(f"Skipping missing source {source}")
            return False
        try:
            self.run(["cp", "-rT", str(source), str(destination)], privileged=True)
            return True
        except CommandError as e:
            logger.warning(f"Failed to copy {source} -> {destination}: {e}")
            return False

    @staticmethod
    def which(program: str) -> Optional[str]:
        """Locate a program on PATH."""
        return shutil.which(program)


def find_missing(programs: Sequence[str]) -> List[str]:
    """Names from programs that are not available on PATH."""
    return [name for name in programs if CommandRunner.which(name) is None]
