"""Resource URI building and parsing.

Locators describe where a resource lives with one of two URI forms:

    file:///abs/path/assets/icons             loose file or folder
    zip:file:///abs/app.zip!/assets/icons     entry inside an archive

``jar:`` is accepted as an alias of ``zip:`` when parsing.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union
from urllib.parse import quote, unquote, urlparse
from urllib.request import url2pathname

from bundlefs.errors import ResourceResolutionError

ARCHIVE_SCHEMES = ("zip", "jar")
ENTRY_DELIMITER = "!"


@dataclass(frozen=True)
class ArchiveURI:
    """An archive URI split into the container file and the entry inside it."""
    container_path: Path
    entry_path: str


def uri_scheme(uri: str) -> str:
    """Return the lower-cased scheme of a URI, or "" if it has none."""
    scheme, sep, _ = uri.partition(":")
    return scheme.lower() if sep else ""


def file_uri(path: Union[str, Path]) -> str:
    """Build a ``file:`` URI for a filesystem path."""
    return Path(path).resolve().as_uri()


def archive_uri(container: Union[str, Path], entry: str) -> str:
    """Build a ``zip:`` URI pointing at ``entry`` inside ``container``."""
    return f"zip:{file_uri(container)}{ENTRY_DELIMITER}/{quote(entry.lstrip('/'))}"


def file_uri_to_path(uri: str) -> Path:
    """
    Convert a ``file:`` URI to a filesystem path.

    Raises:
        ResourceResolutionError: If the URI is not a usable file URI
    """
    try:
        parsed = urlparse(uri)
    except ValueError as e:
        raise ResourceResolutionError(f"Malformed URI: {uri}", path=uri, cause=e) from e

    if parsed.scheme.lower() != "file":
        raise ResourceResolutionError(f"Expected a file URI, got: {uri}", path=uri)
    if not parsed.path:
        raise ResourceResolutionError(f"File URI has no path: {uri}", path=uri)
    return Path(url2pathname(parsed.path))


def parse_archive_uri(uri: str) -> ArchiveURI:
    """
    Split an archive URI into container path and entry path.

    Args:
        uri: URI such as ``zip:file:///app.zip!/assets/icons``

    Returns:
        ArchiveURI with the container path and the entry path (no leading "/")

    Raises:
        ResourceResolutionError: If the scheme is not an archive scheme,
            the "!" delimiter is missing, or the container is not a file URI
    """
    scheme = uri_scheme(uri)
    if scheme not in ARCHIVE_SCHEMES:
        raise ResourceResolutionError(f"Not an archive URI: {uri}", path=uri)

    rest = uri[len(scheme) + 1:]
    container, delimiter, entry = rest.partition(ENTRY_DELIMITER)
    if not delimiter:
        raise ResourceResolutionError(
            f"Archive URI is missing the '{ENTRY_DELIMITER}' entry delimiter: {uri}",
            path=uri,
        )
    if not container:
        raise ResourceResolutionError(f"Archive URI has no container: {uri}", path=uri)

    return ArchiveURI(
        container_path=file_uri_to_path(container),
        entry_path=unquote(entry).strip("/"),
    )
