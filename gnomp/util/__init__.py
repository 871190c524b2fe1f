"""Utility module initialization."""

from .compression import check_archive, create_archive, extract_archive, extract_zip
from .logging import get_logger, setup_logging
from .paths import (
    calculate_path_size,
    copy_contents,
    copy_home_relative,
    copy_path,
    ensure_directory,
    format_size,
    reset_directory,
)
from .timeutil import format_duration, generate_backup_stamp

__all__ = [
    # compression
    "check_archive",
    "create_archive",
    "extract_archive",
    "extract_zip",
    # logging
    "get_logger",
    "setup_logging",
    # paths
    "calculate_path_size",
    "copy_contents",
    "copy_home_relative",
    "copy_path",
    "ensure_directory",
    "format_size",
    "reset_directory",
    # timeutil
    "format_duration",
    "generate_backup_stamp",
]
