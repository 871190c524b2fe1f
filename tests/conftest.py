"""Shared fixtures."""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from gnomp.backup.bundle import BackupBundle
from gnomp.config import GnompConfig
from gnomp.errors import ExtensionFetchError
from gnomp.util.compression import create_archive


class FakeSettings:
    """In-memory stand-in for the dconf settings tree."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values = dict(values or {})
        self.reset_schemas: List[str] = []
        self.enabled_extensions: Optional[List[str]] = None
        self.load_calls = 0

    def dump(self, output_path: Path) -> Path:
        lines = [f"{key}={value}" for key, value in sorted(self.values.items())]
        output_path.write_text("\n".join(lines) + "\n")
        return output_path

    def load(self, input_path: Path) -> None:
        # dconf load merges into the existing tree
        self.load_calls += 1
        for line in input_path.read_text().splitlines():
            if "=" in line:
                key, value = line.split("=", 1)
                self.values[key] = value

    def reset_all(self) -> None:
        self.values.clear()

    def reset_recursively(self, schema: str) -> bool:
        self.reset_schemas.append(schema)
        return True

    def set_enabled_extensions(self, uuids: Iterable[str]) -> None:
        self.enabled_extensions = list(uuids)


class FakeExtensions:
    """Stand-in for gnome-extensions; calls made from inside an event loop are recorded."""

    def __init__(
        self,
        enabled: Iterable[str] = (),
        installed: Iterable[str] = (),
        version_error: Optional[Exception] = None,
    ):
        self.enabled = list(enabled)
        self.installed = set(installed)
        self.version_error = version_error
        self.enable_calls: List[str] = []
        self.version_calls = 0
        self.calls_in_loop: List[str] = []

    def _record_loop(self, name: str) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self.calls_in_loop.append(name)

    def list_enabled(self) -> List[str]:
        return list(self.enabled)

    def is_installed(self, uuid: str) -> bool:
        self._record_loop("is_installed")
        return uuid in self.installed

    def enable(self, uuid: str) -> bool:
        self._record_loop("enable")
        self.enable_calls.append(uuid)
        return True

    def shell_version(self) -> str:
        self._record_loop("shell_version")
        self.version_calls += 1
        if self.version_error is not None:
            raise self.version_error
        return "46.0"


class FakeCatalog:
    """Stand-in for the remote catalog; uuids in failing cannot be fetched."""

    def __init__(self, failing: Iterable[str] = ()):
        self.failing = set(failing)
        self.requested: List[str] = []

    @asynccontextmanager
    async def create_session(self):
        yield object()

    async def install(self, session, uuid: str, shell_version: str, extensions_dir: Path) -> Path:
        self.requested.append(uuid)
        if uuid in self.failing:
            raise ExtensionFetchError(f"No download for {uuid} on GNOME Shell {shell_version}")
        target = extensions_dir / uuid
        target.mkdir(parents=True, exist_ok=True)
        (target / "metadata.json").write_text('{"uuid": "%s"}' % uuid)
        return target


@pytest.fixture
def home(tmp_path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def config(home, tmp_path) -> GnompConfig:
    return GnompConfig(home=home, gdm_theme_path=tmp_path / "usr/share/gnome-shell/theme")


def build_archive(
    directory: Path,
    settings: Dict[str, str],
    extensions: List[str],
    theme_files: Optional[Dict[str, str]] = None,
    theme_links: Optional[Dict[str, str]] = None,
) -> Path:
    """Create a backup archive as the backup procedure would lay it out."""
    bundle = BackupBundle(directory).create()
    FakeSettings(settings).dump(bundle.settings_file)
    bundle.write_extension_list(extensions)
    for uuid in extensions:
        ext_dir = bundle.extensions_dir / uuid
        ext_dir.mkdir(parents=True)
        (ext_dir / "extension.js").write_text("// extension")
    for rel, content in (theme_files or {}).items():
        target = bundle.themes_dir / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    for rel, link_target in (theme_links or {}).items():
        link = bundle.themes_dir / rel
        link.parent.mkdir(parents=True, exist_ok=True)
        link.symlink_to(link_target)
    return create_archive(bundle.root)
