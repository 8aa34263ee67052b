"""Resource explorer: one API for loose and archived resources.

Callers address resources by paths relative to the resource namespace
(``assets/`` by default). Whether a resource is served from a loose
directory or from inside a ZIP bundle is decided per call by the resolver,
and results come back in the same normalized, relative form either way.

Usage Example:

    ```python
    from bundlefs import ResourceExplorer, SearchPathLocator

    explorer = ResourceExplorer(SearchPathLocator(["dist/app.pyz", "src"]))

    shader = explorer.read_resource("shaders/basic.vert")
    icons = explorer.list_resources("icons", recursive=True)
    ```
"""

import logging
import os
from typing import List, Optional, Union

from bundlefs.archive import ArchiveMount, list_archive_files, read_archive_entry
from bundlefs.errors import NotFoundError, ResourceError
from bundlefs.fileops import read_file_bytes
from bundlefs.locator import ChainLocator, PackageLocator, ResourceLocator, SearchPathLocator
from bundlefs.paths import normalize, strip_resource_prefix
from bundlefs.resolver import DEFAULT_PREFIX, ArchiveResolver, InArchive, OnDisk, ResourceLocation
from bundlefs.walker import list_files

logger = logging.getLogger(__name__)


class ResourceExplorer:
    """Reads and lists resources regardless of how they are stored.

    Attributes:
        resolver: Classifies paths as OnDisk or InArchive
        follow_symlinks: Descend into symlinked folders on disk
        max_depth: Depth limit for recursive listings, on disk and in archives
        encoding: Text encoding used by read_resource
    """

    def __init__(
        self,
        locator: Optional[ResourceLocator] = None,
        prefix: str = DEFAULT_PREFIX,
        follow_symlinks: bool = False,
        max_depth: Optional[int] = None,
        encoding: str = "utf-8",
    ):
        self.resolver = ArchiveResolver(locator, prefix)
        self.follow_symlinks = follow_symlinks
        self.max_depth = max_depth
        self.encoding = encoding

    @classmethod
    def from_config(cls, config) -> 'ResourceExplorer':
        """
        Build an explorer from an ExplorerConfig.

        Package lookup comes first, then the search roots in order.
        """
        locators: List[ResourceLocator] = []
        if config.package:
            locators.append(PackageLocator(config.package))
        if config.search_roots:
            locators.append(SearchPathLocator(config.search_roots))

        locator: Optional[ResourceLocator] = None
        if len(locators) == 1:
            locator = locators[0]
        elif locators:
            locator = ChainLocator(locators)

        return cls(
            locator=locator,
            prefix=config.resource_prefix,
            follow_symlinks=config.follow_symlinks,
            max_depth=config.max_depth,
            encoding=config.encoding,
        )

    @property
    def locator(self) -> ResourceLocator:
        return self.resolver.locator

    @property
    def prefix(self) -> str:
        return self.resolver.prefix

    def locate(self, relative_path: str) -> ResourceLocation:
        """Resolve where a resource lives without touching its content."""
        return self.resolver.resolve(relative_path)

    def has_resource(self, relative_path: str) -> bool:
        """Check whether a resource (file or folder) exists."""
        try:
            location = self.locate(relative_path)
        except NotFoundError:
            return False

        if isinstance(location, OnDisk):
            return location.path.exists()
        with ArchiveMount(location.archive_path) as mount:
            return mount.exists(location.entry_path)

    def read_resource(self, relative_path: str, binary: bool = False) -> Union[str, bytes]:
        """
        Read a resource fully.

        Args:
            relative_path: Resource-relative path of a file
            binary: Return raw bytes instead of decoded text

        Returns:
            Text decoded with the configured encoding, or bytes

        Raises:
            NotFoundError: If the resource does not exist
            ArchiveAccessError: If the backing archive cannot be read
            ResourceError: For other read or decode failures
        """
        location = self.locate(relative_path)
        if isinstance(location, InArchive):
            data = read_archive_entry(location.archive_path, location.entry_path)
        else:
            data = read_file_bytes(location.path)

        if binary:
            return data
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise ResourceError(
                f"Resource {relative_path} is not valid {self.encoding} text",
                path=relative_path,
                cause=e,
            ) from e

    def read_resource_bytes(self, relative_path: str) -> bytes:
        """Read a resource as raw bytes."""
        return self.read_resource(relative_path, binary=True)

    def list_resources(self, relative_path: str = "", recursive: bool = False) -> List[str]:
        """
        List the files in a resource folder.

        Args:
            relative_path: Resource-relative folder path ("" for the namespace root)
            recursive: Include files in nested folders

        Returns:
            Normalized paths relative to the listed folder, e.g.
            ``["a.png", "sub/b.png"]``. Order is not guaranteed.

        Raises:
            NotFoundError: If the folder does not exist
            NotADirectoryError: If the path points to a file
            ArchiveAccessError: If the backing archive cannot be read
        """
        location = self.locate(relative_path)
        if isinstance(location, InArchive):
            root = location.entry_path
            files = list_archive_files(location.archive_path, root, recursive, self.max_depth)
            return [strip_resource_prefix(f, root) for f in files]

        root = str(location.path)
        files = list_files(root, recursive, self.follow_symlinks, self.max_depth)
        # Relativize before normalizing; normalize() would trim names inside root
        return [normalize(os.path.relpath(f, root)) for f in files]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(resolver={self.resolver!r})"
