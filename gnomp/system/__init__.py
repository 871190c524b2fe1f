"""System tool adapters."""

from .extensions import ExtensionManager, parse_extension_list, parse_shell_version
from .packages import DependencyChecker
from .runner import CommandRunner, find_missing
from .settings import SettingsStore, to_string_array
from .shell import ShellReloader

__all__ = [
    # runner
    "CommandRunner",
    "find_missing",
    # packages
    "DependencyChecker",
    # settings
    "SettingsStore",
    "to_string_array",
    # extensions
    "ExtensionManager",
    "parse_extension_list",
    "parse_shell_version",
    # shell
    "ShellReloader",
]
