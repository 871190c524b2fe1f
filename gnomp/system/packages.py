"""Required tool detection and installation."""

from typing import Dict, List, Optional, Sequence

from ..errors import CommandError, DependencyError
from ..util.logging import get_logger
from .runner import CommandRunner, find_missing

logger = get_logger(__name__)


class DependencyChecker:
    """Verifies required external programs and installs the missing ones."""

    def __init__(
        self,
        runner: CommandRunner,
        required: Sequence[str],
        package_manager: Sequence[str],
        aliases: Optional[Dict[str, str]] = None,
        install_timeout: int = 1800,
    ):
        self.runner = runner
        self.required = list(required)
        self.package_manager = list(package_manager)
        self.aliases = dict(aliases or {})
        self.install_timeout = install_timeout

    def missing(self) -> List[str]:
        """Required programs not found on PATH."""
        return find_missing(self.required)

    def packages_for(self, tools: Sequence[str]) -> List[str]:
        """Package names to install for the given tools, deduplicated in order."""
        packages: List[str] = []
        for tool in tools:
            package = self.aliases.get(tool, tool)
            if package not in packages:
                packages.append(package)
        return packages

    def ensure(self) -> List[str]:
        """Install whatever is missing.

        Returns:
            The packages that were installed (empty when nothing was missing)

        Raises:
            DependencyError: If the package manager fails
        """
        logger.info("Checking dependencies...")
        missing = self.missing()
        if not missing:
            logger.info("All dependencies present.")
            return []

        packages = self.packages_for(missing)
        logger.warning(f"Installing missing packages: {' '.join(packages)}")
        try:
            # Installation output is not verified afterwards
            self.runner.run(self.package_manager + packages, timeout=self.install_timeout)
        except CommandError as e:
            raise DependencyError(f"Failed to install {', '.join(packages)}: {e}") from e
        return packages
