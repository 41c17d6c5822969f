"""Filesystem metadata for resolved files."""

import os
from datetime import datetime, timezone

from fileserve.domain.entities.file import FileMetadata, ResolvedFile
from fileserve.domain.exceptions import FileAccessError
from fileserve.domain.services.content_type_classifier import (
    ContentTypeClassifier,
    content_type_classifier,
)


class MetadataReader:
    """Builds FileMetadata from stat data. Nothing is cached between calls."""

    def __init__(self, classifier: ContentTypeClassifier | None = None) -> None:
        self._classifier = classifier or content_type_classifier

    def describe(self, resolved: ResolvedFile) -> FileMetadata:
        """Stat a resolved file.

        Raises:
            FileAccessError: If the file vanished or became unreadable after
                it was resolved.
        """
        try:
            stat = os.stat(resolved.absolute_path)
        except OSError as e:
            raise FileAccessError(resolved.relative_path, e) from e

        # Birth time where the platform records it, inode change time otherwise
        created = getattr(stat, "st_birthtime", None) or stat.st_ctime

        return FileMetadata(
            relative_path=resolved.relative_path,
            size_bytes=stat.st_size,
            content_type=self._classifier.classify(resolved.extension),
            created_at=datetime.fromtimestamp(created, tz=timezone.utc),
            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )
