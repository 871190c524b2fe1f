"""Backup restore functionality."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import aiohttp
from tqdm import tqdm

from ..catalog.client import ExtensionCatalog
from ..config import GnompConfig
from ..errors import ArchiveNotFoundError, CommandError, ExtensionFetchError
from ..system.extensions import ExtensionManager
from ..system.runner import CommandRunner
from ..system.settings import SettingsStore
from ..system.shell import ShellReloader
from ..util.compression import check_archive, extract_archive
from ..util.logging import get_logger
from ..util.paths import copy_contents, ensure_directory, reset_directory
from .bundle import BackupBundle

logger = get_logger(__name__)


@dataclass
class RestoreReport:
    """Outcome of a restore run."""

    archive: Path
    working_dir: Path
    extensions: List[str] = field(default_factory=list)
    already_present: List[str] = field(default_factory=list)
    installed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    theme_entries: int = 0
    gdm_theme: bool = False
    reloaded: bool = False


class RestoreExecutor:
    """Replays a backup archive onto the current machine."""

    def __init__(
        self,
        config: GnompConfig,
        runner: Optional[CommandRunner] = None,
        settings: Optional[SettingsStore] = None,
        extensions: Optional[ExtensionManager] = None,
        catalog: Optional[ExtensionCatalog] = None,
        reloader: Optional[ShellReloader] = None,
    ):
        self.config = config
        self.runner = runner or CommandRunner(
            timeout=config.command_timeout,
            privilege_command=config.privilege_command,
        )
        self.settings = settings or SettingsStore(self.runner)
        self.extensions = extensions or ExtensionManager(self.runner)
        self.catalog = catalog or ExtensionCatalog(
            base_url=config.catalog.base_url,
            info_path=config.catalog.info_path,
            timeout=config.catalog.timeout,
            retries=config.catalog.retries,
        )
        self.reloader = reloader or ShellReloader(self.runner)

    def restore(self, archive: Union[str, Path]) -> RestoreReport:
        """Restore everything contained in archive.

        Raises:
            ArchiveNotFoundError: If archive is not an existing file; nothing is touched then
            ArchiveError: If archive is not a readable .tar.gz; nothing is touched then either
        """
        archive_path = Path(archive).expanduser()
        if not archive_path.is_file():
            raise ArchiveNotFoundError(f"File not found: {archive_path}")
        check_archive(archive_path)

        logger.info("Starting GNOME restore...")
        working_dir = self.config.restore_dir
        # Previous restores must not leak into this one
        reset_directory(working_dir)
        extract_archive(archive_path, working_dir, strip_components=1)
        bundle = BackupBundle(working_dir)

        report = RestoreReport(archive=archive_path, working_dir=working_dir)

        if self.config.clean_settings:
            self.settings.reset_all()
        self.settings.load(bundle.settings_file)

        logger.info("Restoring local extensions...")
        copy_contents(bundle.extensions_dir, ensure_directory(self.config.user_extensions_dir))

        logger.info("Reinstalling online extensions (if missing)...")
        report.extensions = bundle.read_extension_list()
        missing = self._partition_extensions(report)
        shell_version = self._shell_version_for(missing, report)
        if shell_version is not None:
            asyncio.run(self._fetch_extensions(missing, shell_version, report))
        # Enabled whether or not they were just installed
        for uuid in report.extensions:
            self.extensions.enable(uuid)

        logger.info("Restoring themes and fonts...")
        report.theme_entries = len(copy_contents(bundle.themes_dir, self.config.home))
        report.gdm_theme = self.runner.copy_privileged(bundle.gdm_theme_dir, self.config.gdm_theme_path)

        logger.info("Applying restored GNOME settings...")
        for schema in self.config.reset_schemas:
            self.settings.reset_recursively(schema)
        self.settings.set_enabled_extensions(report.extensions)

        logger.info("Reloading GNOME Shell...")
        report.reloaded = self.reloader.reload()
        if not report.reloaded:
            logger.warning("Please log out and back in manually.")

        logger.info("GNOME restore complete!")
        return report

    def _partition_extensions(self, report: RestoreReport) -> List[str]:
        """Record already installed extensions and return the ones to fetch."""
        missing = []
        for uuid in report.extensions:
            if self.extensions.is_installed(uuid):
                report.already_present.append(uuid)
            else:
                missing.append(uuid)
        return missing

    def _shell_version_for(self, missing: List[str], report: RestoreReport) -> Optional[str]:
        if not missing:
            return None
        try:
            return self.extensions.shell_version()
        except (CommandError, ValueError) as e:
            for uuid in missing:
                logger.warning(f"Could not fetch {uuid}: {e}")
                report.failed.append(uuid)
            return None

    async def _fetch_extensions(
        self, missing: List[str], shell_version: str, report: RestoreReport
    ) -> None:
        """Fetch missing extensions one at a time."""
        async with self.catalog.create_session() as session:
            with tqdm(total=len(missing), desc="Fetching extensions", unit="ext") as pbar:
                for uuid in missing:
                    pbar.set_postfix_str(uuid)
                    await self._fetch_extension(session, uuid, shell_version, report)
                    pbar.update(1)

    async def _fetch_extension(
        self,
        session: aiohttp.ClientSession,
        uuid: str,
        shell_version: str,
        report: RestoreReport,
    ) -> None:
        logger.info(f"Installing {uuid}...")
        try:
            await self.catalog.install(session, uuid, shell_version, self.config.user_extensions_dir)
        except ExtensionFetchError as e:
            logger.warning(f"Could not fetch {uuid}: {e}")
            report.failed.append(uuid)
            return
        report.installed.append(uuid)
        logger.info(f"{uuid} installed")
