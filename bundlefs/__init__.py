"""
bundlefs - uniform access to resources on disk and inside archive bundles.

Main API:
    from bundlefs import ResourceExplorer, SearchPathLocator

    # Resources live under "assets/" either in a loose folder (development)
    # or inside a zipapp/wheel (packaged). The explorer does not care which.
    explorer = ResourceExplorer(SearchPathLocator(["dist/app.pyz", "src"]))

    # Read a resource as text or bytes
    config_text = explorer.read_resource("config/defaults.json")
    logo = explorer.read_resource("images/logo.png", binary=True)

    # List a resource folder; paths come back relative to that folder
    icons = explorer.list_resources("icons", recursive=True)

    # Path helpers
    from bundlefs import normalize
    normalize(" /games//saves/<slot>/ ")   # "games/saves/_slot_"
"""

from .archive import ArchiveMount, list_archive_files, read_archive_entry
from .errors import (
    AlreadyExistsError,
    ArchiveAccessError,
    NotADirectoryError,
    NotFoundError,
    PathFormatError,
    ResourceError,
    ResourceResolutionError,
)
from .explorer import ResourceExplorer
from .locator import ChainLocator, NullLocator, PackageLocator, ResourceLocator, SearchPathLocator
from .paths import base_name, file_extension, file_name, normalize, strip_resource_prefix
from .resolver import ArchiveResolver, InArchive, OnDisk, ResourceLocation
from .walker import list_files

__version__ = "0.1.0"
__all__ = [
    # Main entry point
    "ResourceExplorer",
    # Locators
    "ResourceLocator",
    "SearchPathLocator",
    "PackageLocator",
    "ChainLocator",
    "NullLocator",
    # Resolution
    "ArchiveResolver",
    "ResourceLocation",
    "OnDisk",
    "InArchive",
    # Traversal
    "list_files",
    "list_archive_files",
    "read_archive_entry",
    "ArchiveMount",
    # Paths
    "normalize",
    "strip_resource_prefix",
    "file_name",
    "file_extension",
    "base_name",
    # Errors
    "ResourceError",
    "NotFoundError",
    "NotADirectoryError",
    "PathFormatError",
    "ResourceResolutionError",
    "ArchiveAccessError",
    "AlreadyExistsError",
]
