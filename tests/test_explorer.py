"""
Tests for the ResourceExplorer facade.

The same assertions run against a loose resource tree and against a ZIP
bundle holding the same tree, since callers must not be able to tell the
two apart.

Tests cover:
- Listing resource folders (relative, normalized results)
- Reading resources as text and bytes
- Missing resources and wrong resource kinds
- Plain-path round trips through fileops
- Building an explorer from configuration
"""

import sys
import zipfile
from typing import Optional

import pytest

from bundlefs import fileops
from bundlefs.config import ExplorerConfig
from bundlefs.errors import (
    ArchiveAccessError,
    NotADirectoryError,
    NotFoundError,
    ResourceError,
)
from bundlefs.explorer import ResourceExplorer
from bundlefs.locator import (
    ChainLocator,
    NullLocator,
    PackageLocator,
    ResourceLocator,
    SearchPathLocator,
)
from bundlefs.resolver import InArchive, OnDisk
from bundlefs.uri import archive_uri


class FixedLocator(ResourceLocator):
    """Locator that answers every lookup with the same URI."""

    def __init__(self, uri: Optional[str]):
        self.uri = uri

    def locate(self, name: str) -> Optional[str]:
        return self.uri

RESOURCES = {
    "assets/config.json": b'{"volume": 7}',
    "assets/icons/a.png": b"\x89PNG-a",
    "assets/icons/sub/b.png": b"\x89PNG-b",
    "assets/text/greeting.txt": "привет, world\n".encode("utf-8"),
    "assets/text/latin1.txt": "caf\xe9".encode("latin-1"),
}


@pytest.fixture
def loose_tree(tmp_path):
    root = tmp_path / "src"
    for name, data in RESOURCES.items():
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    return root


@pytest.fixture
def bundle(tmp_path):
    archive = tmp_path / "app.pyz"
    with zipfile.ZipFile(archive, "w") as z:
        for name, data in RESOURCES.items():
            z.writestr(name, data)
    return archive


@pytest.fixture(params=["disk", "archive"])
def explorer(request, loose_tree, bundle):
    """Explorer backed either by the loose tree or by the bundle."""
    root = loose_tree if request.param == "disk" else bundle
    return ResourceExplorer(SearchPathLocator([root]))


class TestListResources:
    """Test folder listings in both storage modes."""

    def test_non_recursive(self, explorer):
        assert set(explorer.list_resources("icons")) == {"a.png"}

    def test_recursive(self, explorer):
        assert set(explorer.list_resources("icons", recursive=True)) == {"a.png", "sub/b.png"}

    def test_namespace_root(self, explorer):
        assert set(explorer.list_resources("")) == {"config.json"}

    def test_messy_path_is_normalized(self, explorer):
        assert set(explorer.list_resources("\\icons//")) == {"a.png"}

    def test_results_are_normalized(self, explorer):
        for path in explorer.list_resources("", recursive=True):
            assert "\\" not in path
            assert not path.startswith("/")

    def test_missing_folder(self, explorer):
        with pytest.raises(NotFoundError):
            explorer.list_resources("sounds")

    def test_file_instead_of_folder(self, explorer):
        with pytest.raises(NotADirectoryError):
            explorer.list_resources("config.json")


class TestReadResource:
    """Test reads in both storage modes."""

    def test_read_text(self, explorer):
        assert explorer.read_resource("text/greeting.txt") == "привет, world\n"

    def test_read_bytes(self, explorer):
        assert explorer.read_resource("icons/a.png", binary=True) == b"\x89PNG-a"
        assert explorer.read_resource_bytes("icons/sub/b.png") == b"\x89PNG-b"

    def test_missing_file(self, explorer):
        with pytest.raises(NotFoundError):
            explorer.read_resource("icons/c.png")

    def test_undecodable_text(self, explorer):
        with pytest.raises(ResourceError):
            explorer.read_resource("text/latin1.txt")

    def test_other_encoding(self, loose_tree):
        explorer = ResourceExplorer(SearchPathLocator([loose_tree]), encoding="latin-1")
        assert explorer.read_resource("text/latin1.txt") == "café"

    def test_read_folder_fails(self, explorer):
        with pytest.raises(ResourceError):
            explorer.read_resource("icons")


class TestHasResource:
    """Test existence checks."""

    def test_existing(self, explorer):
        assert explorer.has_resource("icons/a.png")
        assert explorer.has_resource("icons")

    def test_missing(self, explorer):
        assert not explorer.has_resource("icons/zzz.png")


class TestLocate:
    """Test that each mode reports the right location type."""

    def test_disk(self, loose_tree):
        explorer = ResourceExplorer(SearchPathLocator([loose_tree]))
        assert isinstance(explorer.locate("icons"), OnDisk)

    def test_archive(self, bundle):
        explorer = ResourceExplorer(SearchPathLocator([bundle]))
        location = explorer.locate("icons")
        assert isinstance(location, InArchive)
        assert location.entry_path == "assets/icons"


class TestUnprefixedArchive:
    """Test an archive listed without a resource namespace."""

    def test_root_r_listing(self, tmp_path):
        """
        Given: An archive with r/a.png and r/sub/b.png
        When: Listing r with an empty prefix
        Then: {a.png} non-recursively, {a.png, sub/b.png} recursively
        """
        archive = tmp_path / "r.zip"
        with zipfile.ZipFile(archive, "w") as z:
            z.writestr("r/a.png", b"a")
            z.writestr("r/sub/b.png", b"b")
        explorer = ResourceExplorer(SearchPathLocator([archive]), prefix="")

        assert set(explorer.list_resources("r")) == {"a.png"}
        assert set(explorer.list_resources("r", recursive=True)) == {"a.png", "sub/b.png"}


class TestPlainMode:
    """Test explorers without a locator, working on plain paths."""

    def test_write_then_read_round_trip(self, tmp_path):
        path = tmp_path / "notes.txt"
        content = "line one\nстрока два\r\nlast"
        fileops.create_file(path)
        fileops.write_file(path, content)

        explorer = ResourceExplorer(NullLocator())

        assert explorer.read_resource(str(path)) == content

    def test_list_plain_folder(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "x.txt").write_text("x")
        (tmp_path / "sub" / "y.txt").write_text("y")
        explorer = ResourceExplorer()

        assert set(explorer.list_resources(str(tmp_path))) == {"x.txt"}
        assert set(explorer.list_resources(str(tmp_path), recursive=True)) == {"x.txt", "sub/y.txt"}

    @pytest.mark.skipif(sys.platform == "win32", reason="Windows trims trailing spaces in names")
    def test_folder_name_with_trailing_space(self, tmp_path):
        """
        Given: A plain folder whose name ends in a space
        When: Listing it
        Then: Results are relative to that folder, not absolute paths
        """
        folder = tmp_path / "dir "
        (folder / "sub").mkdir(parents=True)
        (folder / "x.txt").write_text("x")
        (folder / "sub" / "y.txt").write_text("y")
        explorer = ResourceExplorer()

        assert explorer.list_resources(str(folder)) == ["x.txt"]
        assert set(explorer.list_resources(str(folder), recursive=True)) == {"x.txt", "sub/y.txt"}


class TestMaxDepth:
    """Test that depth limits apply in both storage modes."""

    @pytest.fixture(params=["disk", "archive"])
    def shallow_explorer(self, request, loose_tree, bundle):
        root = loose_tree if request.param == "disk" else bundle
        return ResourceExplorer(SearchPathLocator([root]), max_depth=1)

    def test_depth_one_keeps_direct_children(self, shallow_explorer):
        assert set(shallow_explorer.list_resources("icons", recursive=True)) == {"a.png"}

    def test_unlimited_by_default(self, explorer):
        assert explorer.max_depth is None
        assert set(explorer.list_resources("icons", recursive=True)) == {"a.png", "sub/b.png"}


class TestArchiveFailures:
    """Test archive-level failures through the facade."""

    def test_failed_listing_releases_mount(self, bundle):
        """Listings keep working after one failed inside the archive."""
        explorer = ResourceExplorer(SearchPathLocator([bundle]))
        with pytest.raises(NotADirectoryError):
            explorer.list_resources("config.json")

        for _ in range(3):
            assert set(explorer.list_resources("icons")) == {"a.png"}

    def test_unreadable_archive(self, tmp_path):
        """A located but broken archive is reported as an archive problem."""
        junk = tmp_path / "junk.zip"
        junk.write_bytes(b"PK\x03\x04 truncated")
        explorer = ResourceExplorer(FixedLocator(archive_uri(junk, "assets/icons")))

        with pytest.raises(ArchiveAccessError):
            explorer.list_resources("icons")
        with pytest.raises(ArchiveAccessError):
            explorer.read_resource("icons/a.png")


class TestFromConfig:
    """Test building explorers from ExplorerConfig."""

    def test_search_roots(self, bundle):
        explorer = ResourceExplorer.from_config(ExplorerConfig(search_roots=[str(bundle)]))

        assert isinstance(explorer.locator, SearchPathLocator)
        assert set(explorer.list_resources("icons")) == {"a.png"}

    def test_package_and_roots_chain(self, bundle):
        settings = ExplorerConfig(search_roots=[str(bundle)], package="bundlefs")
        explorer = ResourceExplorer.from_config(settings)

        assert isinstance(explorer.locator, ChainLocator)
        assert isinstance(explorer.locator.locators[0], PackageLocator)

    def test_settings_are_carried(self):
        settings = ExplorerConfig(resource_prefix="data/", follow_symlinks=True, max_depth=4, encoding="latin-1")
        explorer = ResourceExplorer.from_config(settings)

        assert explorer.prefix == "data/"
        assert explorer.follow_symlinks is True
        assert explorer.max_depth == 4
        assert explorer.encoding == "latin-1"
        assert isinstance(explorer.locator, NullLocator)
