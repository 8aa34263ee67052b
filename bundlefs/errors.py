"""Error taxonomy for bundlefs.

Every public operation either returns a result or raises one of these.
Low-level failures (OSError, zipfile.BadZipFile, malformed URIs) are
wrapped at the component boundary and kept on ``cause``.
"""

from typing import Optional


class ResourceError(Exception):
    """Base error for resource access.

    Attributes:
        path: The path or resource name the operation was working on
        cause: The underlying exception, if this error wraps one
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.path = path
        self.cause = cause


class NotFoundError(ResourceError):
    """Target file, folder or archive entry does not exist."""
    pass


class NotADirectoryError(ResourceError):
    """Operation required a directory but got a file."""
    pass


class PathFormatError(ResourceError):
    """Path is malformed for the requested operation."""
    pass


class ResourceResolutionError(ResourceError):
    """Resource lookup returned a location that could not be parsed."""
    pass


class ArchiveAccessError(ResourceError):
    """Archive container could not be opened or read."""
    pass


class AlreadyExistsError(ResourceError):
    """File to be created already exists."""
    pass
