"""Exception types raised by gnomp."""

from typing import List, Optional


class GnompError(Exception):
    """Base error for all gnomp failures."""
    pass


class CommandError(GnompError):
    """External command execution error."""

    def __init__(
        self,
        message: str,
        cmd: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.cmd = cmd or []
        self.returncode = returncode
        self.stderr = stderr


class DependencyError(GnompError):
    """Missing tools could not be installed."""
    pass


class ArchiveNotFoundError(GnompError):
    """Restore input does not point to an existing archive file."""
    pass


class ExtensionFetchError(GnompError):
    """An extension could not be fetched from the remote catalog."""
    pass


class ArchiveError(GnompError):
    """Restore input is not a readable .tar.gz archive."""
    pass
