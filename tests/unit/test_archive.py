"""Tests for the raw HTML archive."""

from pathlib import Path

from conference_iq.services.archive import LocalHtmlArchive, archive_filename, default_archive_dir


class TestLocalHtmlArchive:
    def test_filename(self):
        """Files are grouped by conference and named by host and time."""
        name = archive_filename("abc123", "https://www.devconf.io/2024")
        directory, filename = name.split("/")
        assert directory == "abc123"
        assert filename.startswith("www_devconf_io_")
        assert filename.endswith(".html")

    def test_save(self, tmp_path):
        archive = LocalHtmlArchive(tmp_path)

        path = archive.save("<html>DevConf</html>", "abc123", "https://devconf.io/")

        assert path is not None
        assert Path(path).parent == tmp_path / "abc123"
        assert Path(path).read_text(encoding="utf-8") == "<html>DevConf</html>"

    def test_save_failure_returns_none(self, tmp_path):
        """Write errors are reported, not raised."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")

        assert LocalHtmlArchive(blocker).save("<html></html>", "abc123", "https://devconf.io/") is None

    def test_default_dir_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CONFERENCE_IQ_ARCHIVE_DIR", str(tmp_path))
        assert default_archive_dir() == tmp_path
        assert LocalHtmlArchive().base_dir == tmp_path
