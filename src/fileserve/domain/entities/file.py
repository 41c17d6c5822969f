"""File entities produced by path resolution and retrieval."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ResolvedFile:
    """A file located under the storage root.

    Only PathResolver creates these. The absolute path is canonical and
    contained in the storage root; relative_path always uses forward slashes.
    """

    absolute_path: Path
    relative_path: str
    extension: str

    @property
    def name(self) -> str:
        """Final path component, including any auto-detected extension."""
        return self.absolute_path.name


@dataclass(frozen=True)
class FileMetadata:
    """Descriptive metadata for a resolved file."""

    relative_path: str
    size_bytes: int
    content_type: str
    created_at: datetime
    modified_at: datetime

    def to_dict(self) -> dict[str, str | int]:
        return {
            "fileName": self.relative_path,
            "fileSize": self.size_bytes,
            "contentType": self.content_type,
            "createdAt": self.created_at.isoformat(),
            "modifiedAt": self.modified_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class FileContent:
    """Raw (or derived) bytes of a file with their media type."""

    content: bytes
    content_type: str
    file_name: str


@dataclass(frozen=True, slots=True)
class Base64Content:
    """Base64-encoded file bytes with their media type."""

    base64_data: str
    content_type: str
    file_name: str
