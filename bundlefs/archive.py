"""Read-only traversal of ZIP archive bundles.

An ArchiveMount is a scoped view onto one archive: it is opened for a
single listing or read call and closed before that call returns, on
success and on failure alike. Nothing is cached between calls, so
concurrent callers each get their own independent mount.

Usage:

    ```python
    with ArchiveMount("app.zip") as mount:
        for entry in walk_entries(mount, "assets/icons", recursive=True):
            print(entry)
    ```
"""

import logging
import zipfile
import zlib
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Union

from bundlefs.errors import (
    ArchiveAccessError,
    NotADirectoryError,
    NotFoundError,
    ResourceError,
)

logger = logging.getLogger(__name__)

# Errors zipfile raises for damaged, truncated, encrypted or unsupported members
_READ_ERRORS = (
    OSError, EOFError, zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError,
)


def entry_key(entry: str) -> str:
    """Canonical form of an entry path: "/" separators, no outer slashes."""
    return (entry or "").replace("\\", "/").strip("/")


class ArchiveMount:
    """Scoped, read-only view of an archive's entry tree.

    Directory entries are indexed whether the archive stores them
    explicitly or only implies them through file names
    (``a/b/c.png`` implies ``a`` and ``a/b``). The archive root is the
    directory ``""``.

    Attributes:
        archive_path: Path of the archive file
    """

    def __init__(self, archive_path: Union[str, Path]):
        self.archive_path = Path(archive_path)
        self._zip: Optional[zipfile.ZipFile] = None
        self._files: Dict[str, zipfile.ZipInfo] = {}
        self._dirs: Set[str] = set()
        self._children: Dict[str, Set[str]] = {}

    @classmethod
    def open(cls, archive_path: Union[str, Path]) -> 'ArchiveMount':
        """Open a mount. The caller is responsible for close()."""
        mount = cls(archive_path)
        mount._mount()
        return mount

    def _mount(self) -> None:
        try:
            self._zip = zipfile.ZipFile(self.archive_path, "r")
            infos = self._zip.infolist()
        except (OSError, zipfile.BadZipFile, ValueError) as e:
            self.close()
            raise ArchiveAccessError(
                f"Cannot open archive {self.archive_path}: {e}",
                path=str(self.archive_path),
                cause=e,
            ) from e

        self._index(infos)
        logger.debug(f"Mounted {self.archive_path} ({len(self._files)} file entries)")

    def _index(self, infos: List[zipfile.ZipInfo]) -> None:
        self._files = {}
        self._dirs = {""}
        self._children = {"": set()}
        for info in infos:
            key = entry_key(info.filename)
            if not key:
                continue
            if info.is_dir():
                self._add_dir(key)
            else:
                self._files[key] = info
                self._link(key)

    def _add_dir(self, key: str) -> None:
        if key in self._dirs:
            return
        self._dirs.add(key)
        self._children.setdefault(key, set())
        self._link(key)

    def _link(self, key: str) -> None:
        parent = key.rpartition("/")[0]
        self._add_dir(parent)
        self._children[parent].add(key)

    @property
    def closed(self) -> bool:
        return self._zip is None

    def close(self) -> None:
        """Release the archive handle. Safe to call more than once."""
        if self._zip is not None:
            self._zip.close()
            self._zip = None
            logger.debug(f"Unmounted {self.archive_path}")

    def __enter__(self) -> 'ArchiveMount':
        if self._zip is None:
            self._mount()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _require_open(self) -> zipfile.ZipFile:
        if self._zip is None:
            raise ArchiveAccessError(
                f"Archive mount is closed: {self.archive_path}",
                path=str(self.archive_path),
            )
        return self._zip

    def is_dir(self, entry: str) -> bool:
        self._require_open()
        return entry_key(entry) in self._dirs

    def is_file(self, entry: str) -> bool:
        self._require_open()
        return entry_key(entry) in self._files

    def exists(self, entry: str) -> bool:
        return self.is_dir(entry) or self.is_file(entry)

    def children(self, entry: str) -> List[str]:
        """List the full entry paths directly under a directory entry."""
        self._require_open()
        return sorted(self._children.get(entry_key(entry), ()))

    def read(self, entry: str) -> bytes:
        """
        Read one file entry fully.

        Raises:
            NotFoundError: If there is no such entry
            ResourceError: If the entry is a directory
            ArchiveAccessError: If the entry cannot be decompressed or read
        """
        archive = self._require_open()
        key = entry_key(entry)
        if key in self._dirs and key not in self._files:
            raise ResourceError(f"Archive entry is a folder: {entry}", path=entry)
        info = self._files.get(key)
        if info is None:
            raise NotFoundError(
                f"Entry not found in {self.archive_path}: {entry}", path=entry
            )
        try:
            with archive.open(info) as stream:
                return stream.read()
        except _READ_ERRORS as e:
            raise ArchiveAccessError(
                f"Cannot read {entry} from {self.archive_path}: {e}",
                path=entry,
                cause=e,
            ) from e

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"{self.__class__.__name__}(archive_path='{self.archive_path}', {state})"


def walk_entries(
    mount: ArchiveMount,
    root: str,
    recursive: bool = False,
    max_depth: Optional[int] = None,
) -> Iterator[str]:
    """
    Lazily yield the file entries under a directory entry.

    Directories below the root are descended into only when recursive,
    and, with max_depth, only while their files would sit at most
    max_depth levels below the root (1 means direct children only).
    Yields entry paths relative to the archive root.
    """
    stack = [(entry_key(root), 1)]
    while stack:
        directory, depth = stack.pop()
        for child in mount.children(directory):
            if mount.is_dir(child):
                if recursive and (max_depth is None or depth < max_depth):
                    stack.append((child, depth + 1))
            else:
                yield child


def list_archive_files(
    archive: Union[str, Path],
    internal_root: str,
    recursive: bool = False,
    max_depth: Optional[int] = None,
) -> List[str]:
    """
    List the file entries under a folder inside an archive.

    The archive is mounted for the duration of this call only.

    Args:
        archive: Path of the archive file
        internal_root: Folder inside the archive, "" for the archive root
        recursive: Include files in nested folders
        max_depth: Deepest level to list files from when recursive
            (1 means direct children only)

    Returns:
        Entry paths relative to the archive root (not to internal_root)

    Raises:
        ArchiveAccessError: If the archive cannot be opened or read
        NotFoundError: If internal_root is not in the archive
        NotADirectoryError: If internal_root is a file entry
    """
    with ArchiveMount(archive) as mount:
        if not mount.exists(internal_root):
            raise NotFoundError(
                f"Folder not found in {archive}: {internal_root}", path=internal_root
            )
        if not mount.is_dir(internal_root):
            raise NotADirectoryError(
                f"Archive entry is a file, not a folder: {internal_root}",
                path=internal_root,
            )
        entries = list(walk_entries(mount, internal_root, recursive, max_depth))

    logger.debug(
        f"Listed {len(entries)} entr(ies) under {archive}!/{internal_root} "
        f"(recursive={recursive})"
    )
    return entries


def read_archive_entry(archive: Union[str, Path], entry: str) -> bytes:
    """Read one file entry from an archive, mounting it for this call only."""
    with ArchiveMount(archive) as mount:
        return mount.read(entry)
