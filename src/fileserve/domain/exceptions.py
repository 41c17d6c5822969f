"""Exceptions raised by the file retrieval and image derivative services.

A file that cannot be found is not an exception: services return None for
it. Only the conditions below are raised.
"""


class FileServeError(Exception):
    """Base exception for file serving errors."""

    pass


class InvalidArgumentError(FileServeError, ValueError):
    """Raised for an empty path, an out-of-range quality or dimension, or a bad batch."""

    pass


class PathEscapeError(FileServeError):
    """Raised when a requested path canonicalizes outside the storage root.

    Services collapse this into a not-found result so a blocked traversal
    attempt is indistinguishable from a missing file.
    """

    def __init__(self, requested_path: str) -> None:
        self.requested_path = requested_path
        super().__init__(f"Path escapes storage root: {requested_path!r}")


class ImageTransformError(FileServeError):
    """Raised when an image cannot be decoded, resized or re-encoded."""

    pass


class FileAccessError(FileServeError):
    """Raised when a resolved file cannot be read or stat'ed."""

    def __init__(self, relative_path: str, cause: OSError) -> None:
        self.relative_path = relative_path
        self.cause = cause
        super().__init__(f"Failed to access file {relative_path!r}: {cause}")
