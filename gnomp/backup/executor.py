"""Backup execution engine."""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config import GnompConfig
from ..system.extensions import ExtensionManager
from ..system.runner import CommandRunner
from ..system.settings import SettingsStore
from ..util.compression import create_archive
from ..util.logging import get_logger
from ..util.paths import calculate_path_size, copy_contents, copy_home_relative
from ..util.timeutil import generate_backup_stamp
from .bundle import BackupBundle

logger = get_logger(__name__)


@dataclass
class BackupResult:
    """Outcome of a backup run."""

    archive: Path
    staging_dir: Path
    extensions: List[str] = field(default_factory=list)
    copied_extension_dirs: int = 0
    theme_paths: List[str] = field(default_factory=list)
    gdm_theme: bool = False
    archive_size: int = 0


class BackupExecutor:
    """Captures the current GNOME configuration into a timestamped archive."""

    def __init__(
        self,
        config: GnompConfig,
        runner: Optional[CommandRunner] = None,
        settings: Optional[SettingsStore] = None,
        extensions: Optional[ExtensionManager] = None,
    ):
        self.config = config
        self.runner = runner or CommandRunner(
            timeout=config.command_timeout,
            privilege_command=config.privilege_command,
        )
        self.settings = settings or SettingsStore(self.runner)
        self.extensions = extensions or ExtensionManager(self.runner)

    def execute_backup(self, stamp: Optional[str] = None) -> BackupResult:
        """Run every backup step in order and compress the result.

        Args:
            stamp: Timestamp suffix for the backup directory (current time if None)

        Returns:
            BackupResult with the archive path and what went into it
        """
        stamp = stamp or generate_backup_stamp()
        bundle = BackupBundle(self.config.backup_dir_for(stamp)).create()
        logger.info(f"Starting GNOME backup in {bundle.root}")

        self.settings.dump(bundle.settings_file)

        logger.info("Saving enabled extensions list...")
        enabled = self.extensions.list_enabled()
        bundle.write_extension_list(enabled)

        logger.info("Backing up local extensions...")
        copied_extensions = copy_contents(self.config.user_extensions_dir, bundle.extensions_dir)

        logger.info("Backing up fonts, icons, and cursor themes...")
        theme_paths = copy_home_relative(self.config.home, self.config.theme_paths, bundle.themes_dir)

        logger.info("Backing up GDM theme (if custom)...")
        gdm_theme = self.runner.copy_privileged(self.config.gdm_theme_path, bundle.gdm_theme_dir)

        logger.info("Compressing backup...")
        archive = create_archive(bundle.root, bundle.archive_path)

        if not self.config.keep_staging:
            self._remove_staging(bundle.root)

        result = BackupResult(
            archive=archive,
            staging_dir=bundle.root,
            extensions=enabled,
            copied_extension_dirs=len(copied_extensions),
            theme_paths=theme_paths,
            gdm_theme=gdm_theme,
            archive_size=calculate_path_size(archive),
        )
        logger.info(f"Backup completed! File saved at: {archive}")
        return result

    def _remove_staging(self, staging_dir: Path) -> None:
        try:
            shutil.rmtree(staging_dir)
        except OSError as e:
            # gdm-theme is copied as root and may not be removable by the user
            logger.warning(f"Could not remove staging directory {staging_dir}: {e}")
