"""Tests for the file scanner module."""

from support_copilot.indexing.file_scanner import (
    DEFAULT_EXCLUDES,
    DEFAULT_EXTENSIONS,
    scan_files,
)


class TestDefaultConfiguration:
    """Tests for default configuration values."""

    def test_default_extensions(self):
        """Default extensions should be the supported document types."""
        assert DEFAULT_EXTENSIONS == {".pdf", ".md", ".txt"}

    def test_default_excludes_includes_git(self):
        """Default excludes should include .git and the data directory."""
        assert ".git" in DEFAULT_EXCLUDES
        assert "node_modules" in DEFAULT_EXCLUDES
        assert ".support_copilot" in DEFAULT_EXCLUDES


class TestScanFiles:
    """Tests for scan_files."""

    def test_finds_supported_files_recursively(self, tmp_path):
        """Scanner should find supported files in nested directories."""
        (tmp_path / "guide.md").write_text("# Guide")
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "notes.txt").write_text("notes")
        (tmp_path / "nested" / "manual.pdf").write_bytes(b"%PDF-1.4")

        files, skipped = scan_files(tmp_path)

        names = sorted(f.name for f in files)
        assert names == ["guide.md", "manual.pdf", "notes.txt"]
        assert skipped == []

    def test_unsupported_files_are_reported_as_skipped(self, tmp_path):
        """Files with other extensions should be returned as skipped."""
        (tmp_path / "guide.md").write_text("# Guide")
        (tmp_path / "image.png").write_bytes(b"\x89PNG")

        files, skipped = scan_files(tmp_path)

        assert [f.name for f in files] == ["guide.md"]
        assert [f.name for f in skipped] == ["image.png"]

    def test_extension_match_is_case_insensitive(self, tmp_path):
        """Upper-case extensions should still be picked up."""
        (tmp_path / "README.MD").write_text("# Readme")

        files, _ = scan_files(tmp_path)

        assert [f.name for f in files] == ["README.MD"]

    def test_excluded_directories_are_ignored(self, tmp_path):
        """Files under excluded directories should not be scanned."""
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "notes.txt").write_text("internal")
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "faq.md").write_text("# FAQ")

        files, skipped = scan_files(tmp_path)

        assert [f.name for f in files] == ["faq.md"]
        assert skipped == []

    def test_custom_exclude_patterns(self, tmp_path):
        """Custom patterns should be added to the defaults."""
        (tmp_path / "drafts").mkdir()
        (tmp_path / "drafts" / "wip.md").write_text("draft")
        (tmp_path / "final.md").write_text("final")

        files, _ = scan_files(tmp_path, exclude_patterns=frozenset({"drafts"}))

        assert [f.name for f in files] == ["final.md"]

    def test_root_inside_excluded_name_is_still_scanned(self, tmp_path):
        """Only components below the root are matched against excludes."""
        root = tmp_path / "build" / "docs"
        root.mkdir(parents=True)
        (root / "guide.md").write_text("# Guide")

        files, _ = scan_files(root, exclude_patterns=frozenset({"build"}))

        assert [f.name for f in files] == ["guide.md"]

    def test_results_are_sorted(self, tmp_path):
        """Output order should be deterministic."""
        for name in ("c.md", "a.md", "b.txt"):
            (tmp_path / name).write_text(name)

        files, _ = scan_files(tmp_path)

        assert files == sorted(files)
