"""Classification of resource paths into on-disk and in-archive locations.

The resolver asks its locator for the prefixed resource name. An archive
URI becomes an InArchive location, a file URI becomes OnDisk. When the
locator knows nothing, the path is tried as a plain filesystem path.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from bundlefs.errors import NotFoundError, ResourceResolutionError
from bundlefs.locator import NullLocator, ResourceLocator
from bundlefs.paths import join, normalize
from bundlefs.uri import ARCHIVE_SCHEMES, file_uri_to_path, parse_archive_uri, uri_scheme

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "assets/"


@dataclass(frozen=True)
class OnDisk:
    """Resource is a loose file or folder."""
    path: Path


@dataclass(frozen=True)
class InArchive:
    """Resource is an entry (file or folder) inside an archive."""
    archive_path: Path
    entry_path: str


ResourceLocation = Union[OnDisk, InArchive]


def location_from_uri(uri: str) -> ResourceLocation:
    """
    Turn a locator URI into a ResourceLocation.

    Raises:
        ResourceResolutionError: If the URI scheme is unknown or the URI
            cannot be parsed
    """
    scheme = uri_scheme(uri)
    if scheme in ARCHIVE_SCHEMES:
        parsed = parse_archive_uri(uri)
        return InArchive(archive_path=parsed.container_path, entry_path=parsed.entry_path)
    if scheme == "file":
        return OnDisk(path=file_uri_to_path(uri))
    raise ResourceResolutionError(f"Unsupported resource URI: {uri}", path=uri)


class ArchiveResolver:
    """Resolves resource-relative paths to their storage location.

    Attributes:
        locator: Lookup capability for namespaced resource names
        prefix: Resource namespace, e.g. ``assets/``
    """

    def __init__(self, locator: Optional[ResourceLocator] = None, prefix: str = DEFAULT_PREFIX):
        self.locator = locator or NullLocator()
        self.prefix = prefix

    def resource_name(self, relative_path: str) -> str:
        """Prefixed lookup name for a resource-relative path."""
        return join(self.prefix, relative_path)

    def resolve(self, relative_path: str) -> ResourceLocation:
        """
        Resolve a resource path.

        Args:
            relative_path: Path relative to the resource namespace, or a
                plain filesystem path

        Returns:
            OnDisk or InArchive location

        Raises:
            NotFoundError: If neither the locator nor the filesystem knows it
            ResourceResolutionError: If the locator returned an unusable URI
        """
        name = self.resource_name(relative_path)
        uri = self.locator.locate(name)

        if uri is None:
            plain = Path(relative_path) if relative_path else None
            if plain is not None and plain.exists():
                logger.debug(f"Resolved {relative_path!r} as plain path")
                return OnDisk(path=plain)
            raise NotFoundError(f"Resource not found: {relative_path}", path=relative_path)

        location = location_from_uri(uri)
        logger.debug(f"Resolved {relative_path!r} via {uri} -> {location}")
        return location

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(locator={self.locator!r}, prefix='{normalize(self.prefix)}/')"
