"""Configuration management for gnomp."""

import os
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from ruamel.yaml import YAML

DEFAULT_CONFIG_PATH = Path.home() / ".config/gnomp/config.yaml"


def _default_home() -> Path:
    """Home directory, overridable through GNOMP_HOME."""
    env_home = os.environ.get("GNOMP_HOME")
    return Path(env_home).expanduser() if env_home else Path.home()


class CatalogConfig(BaseModel):
    """Configuration for the remote extension catalog."""

    base_url: str = Field(default="https://extensions.gnome.org", description="Catalog root URL")
    info_path: str = Field(default="/extension-info/", description="Extension info endpoint")
    timeout: int = Field(default=30, description="Per-request timeout in seconds")
    retries: int = Field(default=3, description="Attempts per request before giving up")


class GnompConfig(BaseModel):
    """Main configuration for gnomp."""

    home: Path = Field(default_factory=_default_home, description="Home directory all user paths are relative to")
    backup_prefix: str = Field(default="gnome", description="Prefix of backup directory names")
    keep_staging: bool = Field(default=True, description="Keep the uncompressed backup directory next to the archive")
    clean_settings: bool = Field(default=True, description="Erase the settings tree before loading a backup so no keys from earlier state survive")

    required_tools: List[str] = Field(
        default=["dconf", "gsettings", "gnome-extensions", "gnome-shell", "busctl"],
        description="External programs that must be on PATH"
    )
    package_manager: List[str] = Field(
        default=["sudo", "dnf", "install", "-y"],
        description="Command prefix used to install missing packages"
    )
    package_aliases: Dict[str, str] = Field(
        default={
            "gnome-extensions": "gnome-shell",
            "gsettings": "glib2",
            "busctl": "systemd",
        },
        description="Package providing a tool when its name differs"
    )

    extensions_dir: str = Field(
        default=".local/share/gnome-shell/extensions",
        description="User extension directory, relative to home"
    )
    theme_paths: List[str] = Field(
        default=[
            ".icons",
            ".local/share/icons",
            ".themes",
            ".local/share/themes",
            ".fonts",
            ".local/share/fonts",
        ],
        description="Icon, theme and font directories, relative to home"
    )
    gdm_theme_path: Path = Field(
        default=Path("/usr/share/gnome-shell/theme"),
        description="System GDM theme directory"
    )
    privilege_command: List[str] = Field(
        default=["sudo"],
        description="Prefix for commands touching system-owned paths"
    )
    reset_schemas: List[str] = Field(
        default=[
            "org.gnome.shell",
            "org.gnome.desktop.interface",
            "org.gnome.desktop.wm.preferences",
        ],
        description="gsettings schemas reset to defaults before re-enabling extensions"
    )

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)

    # Runtime settings
    command_timeout: int = Field(default=120, description="Timeout for external commands in seconds")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")

    class Config:
        """Pydantic configuration."""

        validate_assignment = True

    @property
    def backup_root_name(self) -> str:
        return f"{self.backup_prefix}-backup"

    @property
    def restore_dir(self) -> Path:
        """Fixed working directory every restore extracts into."""
        return self.home / f"{self.backup_root_name}-latest"

    @property
    def user_extensions_dir(self) -> Path:
        return self.home / self.extensions_dir

    def backup_dir_for(self, stamp: str) -> Path:
        """Backup staging directory for a given timestamp."""
        return self.home / f"{self.backup_root_name}-{stamp}"


def load_config(config_path: Optional[Path] = None) -> GnompConfig:
    """Load configuration from file or create default."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        yaml = YAML(typ="safe")
        with open(config_path, "r") as f:
            data = yaml.load(f) or {}
        return GnompConfig(**data)
    else:
        config = GnompConfig()
        save_config(config, config_path)
        return config


def save_config(config: GnompConfig, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.default_flow_style = False

    # home is resolved at runtime unless the user pins it
    data = config.model_dump(mode="json", exclude={"home"})
    with open(config_path, "w") as f:
        yaml.dump(data, f)


def get_config() -> GnompConfig:
    """Get the global configuration instance."""

    if not hasattr(get_config, "_config"):
        get_config._config = load_config()

    return get_config._config
