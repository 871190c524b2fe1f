"""Archive creation and extraction."""

import tarfile
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional

from ..errors import ArchiveError
from ..util.logging import get_logger
from ..util.paths import ensure_directory

logger = get_logger(__name__)

# Raised by tarfile and the gzip layer for corrupt or truncated input
_READ_ERRORS = (tarfile.TarError, EOFError, zlib.error)


def create_archive(source_dir: Path, archive_path: Optional[Path] = None) -> Path:
    """Compress a directory into a .tar.gz holding the directory as its only top-level entry."""
    if archive_path is None:
        archive_path = source_dir.with_name(f"{source_dir.name}.tar.gz")

    ensure_directory(archive_path.parent)
    logger.debug(f"Compressing {source_dir} -> {archive_path}")

    with tarfile.open(archive_path, "w:gz") as tar:
        tar.add(source_dir, arcname=source_dir.name)

    return archive_path


def _strip_name(name: str, strip_components: int) -> Optional[str]:
    parts = PurePosixPath(name).parts[strip_components:]
    if not parts:
        return None
    if parts[0] == "/" or ".." in parts:
        return None
    return str(PurePosixPath(*parts))


def _stripped_members(tar: tarfile.TarFile, strip_components: int) -> Iterator[tarfile.TarInfo]:
    for member in tar.getmembers():
        name = _strip_name(member.name, strip_components)
        if name is None:
            if PurePosixPath(member.name).parts[strip_components:]:
                logger.warning(f"Skipping unsafe archive member: {member.name}")
            continue

        if member.islnk():
            linkname = _strip_name(member.linkname, strip_components)
            if linkname is None:
                logger.warning(f"Skipping hard link with unsafe target: {member.name}")
                continue
            member.linkname = linkname

        member.name = name
        yield member


def check_archive(archive_path: Path) -> int:
    """Read through a .tar.gz without extracting it and return its member count.

    Raises:
        ArchiveError: If the file is not a complete, readable gzip-compressed tar
    """
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            return len(tar.getmembers())
    except _READ_ERRORS as e:
        raise ArchiveError(f"Not a valid .tar.gz archive: {archive_path} ({e})") from e


def extract_archive(archive_path: Path, destination: Path, strip_components: int = 1) -> Path:
    """Extract a .tar.gz into destination, dropping leading path components like tar --strip-components.

    Raises:
        ArchiveError: If the archive cannot be read
    """
    ensure_directory(destination)
    logger.debug(f"Extracting {archive_path} -> {destination}")

    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            tar.extractall(
                destination,
                members=_stripped_members(tar, strip_components),
                filter="tar",
            )
    except _READ_ERRORS as e:
        raise ArchiveError(f"Not a valid .tar.gz archive: {archive_path} ({e})") from e

    return destination


def extract_zip(zip_path: Path, destination: Path) -> Path:
    """Unpack a zip file into destination, overwriting existing files."""
    ensure_directory(destination)
    with zipfile.ZipFile(zip_path) as archive:
        archive.extractall(destination)
    return destination
