"""Tests for prerendered page lookup and loading."""

import json

import pytest

from core.prerendered import AssetReadFailure, PrerenderedFiles


class TestResolve:
    """Test request path to prerendered file resolution."""

    @pytest.fixture
    def files(self):
        return PrerenderedFiles(["index.html", "about.html", "blog/index.html", "robots.txt"])

    @pytest.mark.parametrize(
        "uri,expected",
        [
            ("", "index.html"),
            ("/", "index.html"),
            ("about", "about.html"),
            ("/about", "about.html"),
            ("/about/", "about.html"),
            ("blog/", "blog/index.html"),
            ("/blog", "blog/index.html"),
            ("/robots.txt", "robots.txt"),
            ("missing", None),
            ("/blog/missing", None),
        ],
    )
    def test_resolution(self, files, uri, expected):
        """Test candidate order: index, literal, /index.html, .html."""
        assert files.resolve(uri) == expected

    def test_root_without_index(self):
        """Test that the root resolves to nothing without index.html."""
        assert PrerenderedFiles(["about.html"]).resolve("/") is None

    def test_literal_path_preferred(self):
        """Test that an exact match wins over the .html candidate."""
        files = PrerenderedFiles(["docs", "docs.html"])
        assert files.resolve("/docs") == "docs"

    def test_only_one_slash_stripped_each_side(self):
        """Test that doubled slashes are not collapsed."""
        files = PrerenderedFiles(["about.html"])
        assert files.resolve("//about") is None


class TestLoading:
    """Test building the asset set from disk."""

    def test_from_directory(self, tmp_path):
        """Test that files are discovered recursively as POSIX paths."""
        (tmp_path / "blog").mkdir()
        (tmp_path / "index.html").write_text("home")
        (tmp_path / "blog" / "index.html").write_text("blog")

        files = PrerenderedFiles.from_directory(tmp_path)

        assert files.files == frozenset({"index.html", "blog/index.html"})
        assert len(files) == 2
        assert "blog/index.html" in files

    def test_from_missing_directory(self, tmp_path):
        """Test that a missing directory yields an empty set."""
        files = PrerenderedFiles.from_directory(tmp_path / "nope")
        assert len(files) == 0
        assert files.resolve("/") is None

    def test_from_manifest(self, tmp_path):
        """Test loading the asset set from a JSON manifest."""
        manifest = tmp_path / "prerendered-file-list.json"
        manifest.write_text(json.dumps(["index.html", "about.html"]))

        files = PrerenderedFiles.from_manifest(manifest, tmp_path / "prerendered")

        assert files.files == frozenset({"index.html", "about.html"})
        assert files.directory == tmp_path / "prerendered"

    def test_from_invalid_manifest(self, tmp_path):
        """Test that a manifest that is not a list of strings is rejected."""
        manifest = tmp_path / "manifest.json"
        manifest.write_text(json.dumps({"index.html": True}))

        with pytest.raises(ValueError):
            PrerenderedFiles.from_manifest(manifest, tmp_path)


class TestRead:
    """Test reading prerendered pages."""

    def test_read(self, tmp_path):
        """Test reading a page as UTF-8 text."""
        (tmp_path / "about.html").write_text("<h1>Über</h1>", encoding="utf-8")
        files = PrerenderedFiles(["about.html"], tmp_path)

        assert files.read("about.html") == "<h1>Über</h1>"

    def test_read_failure(self, tmp_path):
        """Test that a listed but missing file raises AssetReadFailure."""
        files = PrerenderedFiles(["gone.html"], tmp_path)

        with pytest.raises(AssetReadFailure) as exc_info:
            files.read("gone.html")

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
