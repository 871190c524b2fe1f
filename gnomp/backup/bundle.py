"""On-disk layout of a backup bundle."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from ..system.extensions import parse_extension_list
from ..util.paths import ensure_directory

SETTINGS_FILE = "dconf-settings.ini"
EXTENSION_LIST_FILE = "extensions-list.txt"
EXTENSIONS_DIR = "extensions"
THEMES_DIR = "themes"
GDM_THEME_DIR = "gdm-theme"


@dataclass
class BackupBundle:
    """A backup directory, before compression or after extraction."""

    root: Path

    @property
    def settings_file(self) -> Path:
        return self.root / SETTINGS_FILE

    @property
    def extension_list_file(self) -> Path:
        return self.root / EXTENSION_LIST_FILE

    @property
    def extensions_dir(self) -> Path:
        return self.root / EXTENSIONS_DIR

    @property
    def themes_dir(self) -> Path:
        return self.root / THEMES_DIR

    @property
    def gdm_theme_dir(self) -> Path:
        return self.root / GDM_THEME_DIR

    @property
    def archive_path(self) -> Path:
        """Where the compressed bundle is written, next to the directory."""
        return self.root.with_name(f"{self.root.name}.tar.gz")

    def create(self) -> "BackupBundle":
        """Create the bundle directory skeleton."""
        ensure_directory(self.root)
        ensure_directory(self.extensions_dir)
        ensure_directory(self.themes_dir)
        return self

    def write_extension_list(self, uuids: Sequence[str]) -> Path:
        """Save extension identifiers, one per line."""
        self.extension_list_file.write_text("".join(f"{uuid}\n" for uuid in uuids))
        return self.extension_list_file

    def read_extension_list(self) -> List[str]:
        """Saved extension identifiers; empty when the list file is absent."""
        if not self.extension_list_file.exists():
            return []
        return parse_extension_list(self.extension_list_file.read_text())
