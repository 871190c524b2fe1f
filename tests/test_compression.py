"""Tests for archive utilities."""

import gzip
import io
import os
import tarfile
import zipfile

import pytest

from gnomp.errors import ArchiveError
from gnomp.util.compression import check_archive, create_archive, extract_archive, extract_zip


class TestArchives:
    """Test tar.gz creation and extraction."""

    def test_create_archive_single_top_level_entry(self, tmp_path):
        """Test the archive sits next to the directory and wraps it."""
        source = tmp_path / "gnome-backup-20250101-120000"
        (source / "themes").mkdir(parents=True)
        (source / "dconf-settings.ini").write_text("[org/gnome]\n")

        archive = create_archive(source)

        assert archive == tmp_path / "gnome-backup-20250101-120000.tar.gz"
        with tarfile.open(archive, "r:gz") as tar:
            tops = {name.split("/")[0] for name in tar.getnames()}
        assert tops == {"gnome-backup-20250101-120000"}

    def test_extract_strips_leading_component(self, tmp_path):
        """Test extraction behaves like tar --strip-components=1."""
        source = tmp_path / "gnome-backup-20250101-120000"
        (source / "themes" / ".icons").mkdir(parents=True)
        (source / "themes" / ".icons" / "index.theme").write_text("icons")
        (source / "extensions-list.txt").write_text("a@example.com\n")
        archive = create_archive(source)

        dest = extract_archive(archive, tmp_path / "latest")

        assert (dest / "extensions-list.txt").read_text() == "a@example.com\n"
        assert (dest / "themes" / ".icons" / "index.theme").read_text() == "icons"
        assert not (dest / "gnome-backup-20250101-120000").exists()

    def test_extract_skips_parent_escapes(self, tmp_path):
        """Test members climbing out of the destination are not written."""
        archive = tmp_path / "evil.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            data = b"owned"
            info = tarfile.TarInfo("top/../../escaped.txt")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
            ok = tarfile.TarInfo("top/ok.txt")
            ok.size = 2
            tar.addfile(ok, io.BytesIO(b"ok"))

        dest = extract_archive(archive, tmp_path / "out" / "latest")

        assert (dest / "ok.txt").read_text() == "ok"
        assert not (tmp_path / "out" / "escaped.txt").exists()
        assert not (tmp_path / "escaped.txt").exists()

    def test_extract_keeps_relative_theme_links(self, tmp_path):
        """Test relative links inside the archive survive the extraction filter."""
        source = tmp_path / "gnome-backup-20250101-120000"
        icons = source / "themes" / ".icons" / "t"
        icons.mkdir(parents=True)
        (icons / "real.png").write_text("png")
        (icons / "link.png").symlink_to("real.png")
        archive = create_archive(source)

        dest = extract_archive(archive, tmp_path / "latest")

        link = dest / "themes" / ".icons" / "t" / "link.png"
        assert link.is_symlink()
        assert link.read_text() == "png"

    def test_gzip_that_is_not_a_tar_raises_archive_error(self, tmp_path):
        """Test gzip-compressed garbage is reported as an unreadable archive."""
        bogus = tmp_path / "bad.tar.gz"
        bogus.write_bytes(gzip.compress(b"this is not a tar stream" * 10))

        with pytest.raises(ArchiveError):
            check_archive(bogus)
        with pytest.raises(ArchiveError):
            extract_archive(bogus, tmp_path / "latest")

    def test_truncated_archive_raises_archive_error(self, tmp_path):
        """Test a cut-off download is reported as an unreadable archive."""
        source = tmp_path / "gnome-backup-20250101-120000"
        source.mkdir()
        (source / "dconf-settings.ini").write_bytes(os.urandom(64 * 1024))
        archive = create_archive(source)
        data = archive.read_bytes()
        archive.write_bytes(data[: len(data) // 2])

        with pytest.raises(ArchiveError):
            check_archive(archive)

    def test_check_archive_counts_members(self, tmp_path):
        """Test a valid archive is read through without extracting."""
        source = tmp_path / "gnome-backup-20250101-120000"
        source.mkdir()
        (source / "extensions-list.txt").write_text("a@example.com\n")
        archive = create_archive(source)

        assert check_archive(archive) == 2
        assert not (tmp_path / "latest").exists()


class TestZip:
    """Test zip unpacking."""

    def test_extract_zip_overwrites(self, tmp_path):
        """Test files already present are replaced."""
        zip_path = tmp_path / "ext.zip"
        with zipfile.ZipFile(zip_path, "w") as archive:
            archive.writestr("metadata.json", '{"uuid": "a@example.com"}')
            archive.writestr("schemas/gschemas.compiled", "bin")
        dest = tmp_path / "a@example.com"
        dest.mkdir()
        (dest / "metadata.json").write_text("old")

        extract_zip(zip_path, dest)

        assert (dest / "metadata.json").read_text() == '{"uuid": "a@example.com"}'
        assert (dest / "schemas" / "gschemas.compiled").exists()

    def test_extract_zip_rejects_non_zip(self, tmp_path):
        """Test garbage input raises BadZipFile."""
        bogus = tmp_path / "ext.zip"
        bogus.write_text("<html>not found</html>")

        with pytest.raises(zipfile.BadZipFile):
            extract_zip(bogus, tmp_path / "out")
