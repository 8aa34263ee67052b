"""Path normalization helpers.

Resource paths are plain strings. After normalize() they use a single
forward slash as separator, carry no leading or trailing slash and have
characters that are illegal on common filesystems replaced with "_".
A Windows drive prefix such as ``C:`` survives normalization.
"""

import re
from typing import Any

from bundlefs.errors import PathFormatError

_SEPARATORS = re.compile(r"[/\\]+")
_ILLEGAL_CHARS = re.compile(r"[<*>?'\":|]")
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")


def normalize(path: Any) -> str:
    """
    Canonicalize a user-supplied path string.

    Collapses runs of ``/`` and ``\\`` into ``/``, strips slashes and
    whitespace from both ends, and replaces ``< * > ? ' " : |`` with ``_``.
    The colon of a leading drive letter is kept.

    Never raises; empty or None input gives an empty string.
    """
    if path is None:
        return ""
    if not isinstance(path, str):
        path = str(path)
    if not path:
        return ""

    has_drive = bool(_DRIVE_PREFIX.match(path))

    result = _SEPARATORS.sub("/", path)
    # Whitespace and slashes can shield each other (" /a/ "), strip until stable
    while True:
        stripped = result.strip().strip("/")
        if stripped == result:
            break
        result = stripped
    result = _ILLEGAL_CHARS.sub("_", result)

    if has_drive and len(result) > 1:
        result = result[0] + ":" + result[2:]
    return result


def join(*parts: Any) -> str:
    """Join path parts with "/" and normalize the result."""
    return normalize("/".join(p for p in (normalize(part) for part in parts) if p))


def strip_resource_prefix(path: Any, prefix: str) -> str:
    """
    Remove a resource-namespace prefix from a path.

    The prefix only matches whole path components, so ``assets/`` strips
    ``assets/img/a.png`` but leaves ``assets2/a.png`` alone.

    Args:
        path: Path to shorten
        prefix: Prefix such as ``assets/``

    Returns:
        Normalized path without the prefix, or the normalized path unchanged
    """
    result = normalize(path)
    prefix = normalize(prefix)
    if not prefix:
        return result
    if result == prefix:
        return ""
    if result.startswith(prefix + "/"):
        return result[len(prefix) + 1:]
    return result


def file_name(path: str) -> str:
    """Return the last component of a path, extension included."""
    trimmed = (path or "").strip().rstrip("/\\")
    return _SEPARATORS.split(trimmed)[-1]


def file_extension(path: str) -> str:
    """
    Return the extension of the file a path points to, without the dot.

    Raises:
        PathFormatError: If the file name has no extension or ends with "."
    """
    name = file_name(path)
    dot = name.rfind(".")
    if dot == -1 or dot == len(name) - 1:
        raise PathFormatError(
            f"Path has no file extension: {path!r}", path=path
        )
    return name[dot + 1:]


def base_name(path: str) -> str:
    """
    Return the file name without its extension.

    Raises:
        PathFormatError: If the file name has no extension
    """
    name = file_name(path)
    extension = file_extension(path)
    return name[:len(name) - len(extension) - 1]
