"""Resource lookup capabilities.

A ResourceLocator answers one question: "where does the resource with this
name live?" It returns a URI (see ``bundlefs.uri``) or None. The explorer
receives a locator at construction instead of consulting a global registry,
so the same code serves packaged and unpacked installs.
"""

import logging
import zipfile
from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path
from typing import Iterable, List, Optional, Union

from bundlefs.archive import ArchiveMount, entry_key
from bundlefs.errors import ArchiveAccessError, ResourceResolutionError
from bundlefs.uri import archive_uri, file_uri

logger = logging.getLogger(__name__)


class ResourceLocator(ABC):
    """Maps a resource name to the URI of its location."""

    @abstractmethod
    def locate(self, name: str) -> Optional[str]:
        """Return a URI for the named resource, or None if it is unreachable.

        Args:
            name: Resource name with "/" separators, e.g. ``assets/icons``
        """
        pass


class NullLocator(ResourceLocator):
    """Locator that never finds anything; lookups fall back to plain paths."""

    def locate(self, name: str) -> Optional[str]:
        return None


class ChainLocator(ResourceLocator):
    """Asks several locators in order and returns the first hit."""

    def __init__(self, locators: Iterable[ResourceLocator]):
        self.locators: List[ResourceLocator] = list(locators)

    def locate(self, name: str) -> Optional[str]:
        for locator in self.locators:
            uri = locator.locate(name)
            if uri is not None:
                return uri
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.locators!r})"


class SearchPathLocator(ResourceLocator):
    """Searches an ordered list of roots, like ``sys.path``.

    Each root is either a directory or a ZIP archive (zipapp, wheel, egg).
    The first root containing the name wins. Roots that do not exist are
    skipped.
    """

    def __init__(self, roots: Iterable[Union[str, Path]]):
        self.roots: List[Path] = [Path(root).expanduser() for root in roots]

    def locate(self, name: str) -> Optional[str]:
        key = entry_key(name)
        for root in self.roots:
            if root.is_dir():
                candidate = root / key if key else root
                if candidate.exists():
                    return file_uri(candidate)
            elif root.is_file() and zipfile.is_zipfile(root):
                if self._archive_contains(root, key):
                    return archive_uri(root, key)
        return None

    def _archive_contains(self, archive: Path, key: str) -> bool:
        try:
            with ArchiveMount(archive) as mount:
                return mount.exists(key)
        except ArchiveAccessError as e:
            logger.warning(f"Skipping unreadable archive on search path {archive}: {e}")
            return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(roots={[str(r) for r in self.roots]})"


class PackageLocator(ResourceLocator):
    """Looks resources up inside an importable package.

    Uses ``importlib.resources``, so it works both when the package is a
    loose directory (development checkout, regular install) and when it
    was imported from a ZIP archive via zipimport.
    """

    def __init__(self, package: str):
        self.package = package

    def locate(self, name: str) -> Optional[str]:
        try:
            base = resources.files(self.package)
        except (ModuleNotFoundError, TypeError) as e:
            raise ResourceResolutionError(
                f"Cannot look up resources in package {self.package!r}: {e}",
                path=name,
                cause=e,
            ) from e

        target = base
        for part in entry_key(name).split("/"):
            if part:
                target = target.joinpath(part)

        if isinstance(target, zipfile.Path):
            if not target.exists():
                return None
            return archive_uri(target.root.filename, target.at)
        if isinstance(target, Path):
            return file_uri(target) if target.exists() else None

        logger.debug(f"Unsupported resource container for {self.package}: {type(target).__name__}")
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(package='{self.package}')"
