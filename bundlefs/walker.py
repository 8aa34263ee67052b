"""Enumeration of regular files under a plain filesystem directory."""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple, Union

from bundlefs.errors import NotADirectoryError, NotFoundError, ResourceError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _raise(error: OSError) -> None:
    raise error


def _inode(path: str) -> Tuple[int, int]:
    stat = os.stat(path)
    return stat.st_dev, stat.st_ino


def iter_files(
    root: PathLike,
    recursive: bool = False,
    follow_symlinks: bool = False,
    max_depth: Optional[int] = None,
) -> Iterator[str]:
    """
    Lazily yield the regular files under a directory.

    The root is validated immediately; the walk itself happens as the
    returned iterator is consumed.

    Args:
        root: Directory to enumerate
        recursive: Descend into subdirectories
        follow_symlinks: Descend into symlinked directories. Each directory
            is entered at most once, identified by (device, inode)
        max_depth: Deepest level to yield files from when recursive
            (1 means direct children only)

    Returns:
        Iterator of full path strings

    Raises:
        NotFoundError: If root does not exist
        NotADirectoryError: If root is not a directory
    """
    root_path = Path(root)
    if not root_path.exists():
        raise NotFoundError(f"Folder not found: {root}", path=str(root))
    if not root_path.is_dir():
        raise NotADirectoryError(
            f"Path points to a file, not a folder: {root}", path=str(root)
        )

    if not recursive:
        max_depth = 1
    return _walk(str(root_path), follow_symlinks, max_depth)


def _walk(top: str, follow_symlinks: bool, max_depth: Optional[int]) -> Iterator[str]:
    visited: Set[Tuple[int, int]] = set()
    try:
        if follow_symlinks:
            visited.add(_inode(top))

        for dirpath, dirnames, filenames in os.walk(
            top, onerror=_raise, followlinks=follow_symlinks
        ):
            depth = len(Path(dirpath).relative_to(top).parts)

            for name in filenames:
                full_path = os.path.join(dirpath, name)
                # Broken links show up in filenames
                if os.path.isfile(full_path):
                    yield full_path

            if max_depth is not None and depth + 1 >= max_depth:
                dirnames[:] = []
            elif follow_symlinks:
                dirnames[:] = [
                    d for d in dirnames
                    if _first_visit(os.path.join(dirpath, d), visited)
                ]
    except OSError as e:
        raise ResourceError(f"Failed to list files in {top}: {e}", path=top, cause=e) from e


def _first_visit(path: str, visited: Set[Tuple[int, int]]) -> bool:
    key = _inode(path)
    if key in visited:
        logger.debug(f"Skipping already visited directory: {path}")
        return False
    visited.add(key)
    return True


def list_files(
    root: PathLike,
    recursive: bool = False,
    follow_symlinks: bool = False,
    max_depth: Optional[int] = None,
) -> List[str]:
    """
    List the regular files under a directory.

    Directories are never included. Paths are returned as produced by the
    traversal (root joined with the relative part), not relativized.
    Ordering is not guaranteed.

    Raises:
        NotFoundError: If root does not exist
        NotADirectoryError: If root is a file
        ResourceError: If the walk fails partway; nothing is returned
    """
    files = list(iter_files(root, recursive, follow_symlinks, max_depth))
    logger.debug(f"Listed {len(files)} file(s) under {root} (recursive={recursive})")
    return files
