"""Plain file operations on the host filesystem.

Thin wrappers over the platform I/O primitives. Each one checks its target,
delegates, and turns OSError into the bundlefs error types.
"""

import gzip
import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Optional, Union

from bundlefs.errors import AlreadyExistsError, NotFoundError, ResourceError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

FILE_NOT_FOUND_MESSAGE = "File not found"


def _missing(path: PathLike) -> NotFoundError:
    return NotFoundError(f"{FILE_NOT_FOUND_MESSAGE}: {path}", path=str(path))


def has_file(path: PathLike) -> bool:
    """Check whether anything exists at path."""
    return Path(path).exists()


def open_file(path: PathLike) -> None:
    """
    Open a file with the default application for its type.

    Raises:
        NotFoundError: If the file does not exist
        ResourceError: If the platform launcher fails
    """
    if not has_file(path):
        raise _missing(path)

    target = str(path)
    try:
        if sys.platform.startswith("win"):
            os.startfile(target)  # type: ignore[attr-defined]
        elif sys.platform == "darwin":
            subprocess.run(["open", target], check=True)
        else:
            subprocess.run(["xdg-open", target], check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise ResourceError(f"Could not open {path}: {e}", path=target, cause=e) from e
    logger.info(f"Opened {path} with default application")


def read_file(path: PathLike, encoding: str = "utf-8") -> str:
    """
    Read a whole file as text.

    Raises:
        NotFoundError: If the file does not exist
        ResourceError: If reading or decoding fails
    """
    file_path = Path(path)
    if not file_path.exists():
        raise _missing(path)
    try:
        return file_path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceError(f"Could not read {path}: {e}", path=str(path), cause=e) from e


def read_file_bytes(path: PathLike) -> bytes:
    """Read a whole file as bytes."""
    file_path = Path(path)
    if not file_path.exists():
        raise _missing(path)
    try:
        return file_path.read_bytes()
    except OSError as e:
        raise ResourceError(f"Could not read {path}: {e}", path=str(path), cause=e) from e


def write_file(path: PathLike, content: str, encoding: str = "utf-8") -> str:
    """
    Replace the content of an existing file.

    Returns:
        The content written

    Raises:
        NotFoundError: If the file does not exist
        ResourceError: If writing fails
    """
    file_path = Path(path)
    if not file_path.exists():
        raise _missing(path)
    try:
        with open(file_path, "w", encoding=encoding, newline="") as f:
            f.write(content)
    except OSError as e:
        raise ResourceError(f"Could not write {path}: {e}", path=str(path), cause=e) from e
    logger.debug(f"Wrote {len(content)} character(s) to {path}")
    return content


def create_file(path: PathLike, content: Optional[str] = None, encoding: str = "utf-8") -> str:
    """
    Create a new file, optionally with initial content.

    Returns:
        The path of the created file

    Raises:
        AlreadyExistsError: If the file already exists
        ResourceError: If creating or writing fails
    """
    file_path = Path(path)
    try:
        file_path.touch(exist_ok=False)
    except FileExistsError as e:
        raise AlreadyExistsError(f"File already exists: {path}", path=str(path), cause=e) from e
    except OSError as e:
        raise ResourceError(f"Could not create {path}: {e}", path=str(path), cause=e) from e

    logger.info(f"Created file {path}")
    if content is not None:
        write_file(file_path, content, encoding=encoding)
    return str(path)


def delete_file(path: PathLike) -> None:
    """
    Delete a file.

    Raises:
        NotFoundError: If the file does not exist
        ResourceError: If deletion fails
    """
    file_path = Path(path)
    if not file_path.exists():
        raise _missing(path)
    try:
        file_path.unlink()
    except OSError as e:
        raise ResourceError(f"Could not delete {path}: {e}", path=str(path), cause=e) from e
    logger.info(f"Deleted file {path}")


def create_folder(path: PathLike) -> str:
    """
    Create a folder and any missing parents.

    Returns:
        The path of the created folder
    """
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ResourceError(f"Could not create folder {path}: {e}", path=str(path), cause=e) from e
    logger.info(f"Created folder {path}")
    return str(path)


def compress_file(path: PathLike, new_path: PathLike) -> None:
    """
    Gzip a file into new_path, then delete the original.

    Raises:
        NotFoundError: If the source file does not exist
        ResourceError: If compression or deletion fails
    """
    if not has_file(path):
        raise _missing(path)
    try:
        with open(path, "rb") as source, gzip.open(new_path, "wb") as target:
            shutil.copyfileobj(source, target)
        os.remove(path)
    except OSError as e:
        raise ResourceError(f"Could not compress {path}: {e}", path=str(path), cause=e) from e
    logger.info(f"Compressed {path} -> {new_path}")


def last_modified(path: PathLike) -> int:
    """
    Get the last modification time of a file.

    Returns:
        Milliseconds since the epoch

    Raises:
        NotFoundError: If the file does not exist
    """
    file_path = Path(path)
    if not file_path.exists():
        raise _missing(path)
    try:
        return file_path.stat().st_mtime_ns // 1_000_000
    except OSError as e:
        raise ResourceError(
            f"Could not read modification time of {path}: {e}", path=str(path), cause=e
        ) from e
