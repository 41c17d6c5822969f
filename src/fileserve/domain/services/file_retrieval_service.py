"""File retrieval: raw bytes, base64, metadata and image derivatives.

Every public operation resolves the requested path first. A path that does
not resolve (missing, or outside the storage root) gives None. Reading and
image work run in the event loop's default executor.
"""

import asyncio
import base64
import contextvars
from collections.abc import Callable
from functools import partial
from typing import TypeVar

from fileserve.core.config import Settings, get_settings
from fileserve.core.logging import get_logger
from fileserve.domain.entities.file import (
    Base64Content,
    FileContent,
    FileMetadata,
    ResolvedFile,
)
from fileserve.domain.entities.image import ImageDerivativeSpec
from fileserve.domain.exceptions import FileAccessError, ImageTransformError
from fileserve.domain.services.content_type_classifier import (
    ContentTypeClassifier,
    content_type_classifier,
)
from fileserve.domain.services.image_transformer import ImageTransformer
from fileserve.domain.services.metadata_reader import MetadataReader
from fileserve.domain.services.path_resolver import PathResolver

logger = get_logger(__name__)

T = TypeVar("T")


def to_base64(content: FileContent) -> Base64Content:
    return Base64Content(
        base64_data=base64.b64encode(content.content).decode("ascii"),
        content_type=content.content_type,
        file_name=content.file_name,
    )


class FileRetrievalService:
    """Answers raw, base64, metadata, thumbnail and mobile requests for one path."""

    def __init__(
        self,
        settings: Settings | None = None,
        resolver: PathResolver | None = None,
        classifier: ContentTypeClassifier | None = None,
        metadata_reader: MetadataReader | None = None,
        transformer: ImageTransformer | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.resolver = resolver or PathResolver(
            self.settings.storage_root, self.settings.allowed_extensions
        )
        self._classifier = classifier or content_type_classifier
        self._metadata_reader = metadata_reader or MetadataReader(self._classifier)
        self._transformer = transformer or ImageTransformer(self._classifier)

    async def _run_in_executor(self, func: Callable[..., T], *args) -> T:
        # Copied context keeps the request's correlation ID in worker thread logs
        context = contextvars.copy_context()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(context.run, func, *args))

    async def get_raw(self, path: str) -> FileContent | None:
        """Get the file's bytes and content type.

        Raises:
            InvalidArgumentError: If the path is empty.
            FileAccessError: If the resolved file cannot be read.
        """
        return await self._run_in_executor(self._load, path)

    async def get_metadata(self, path: str) -> FileMetadata | None:
        return await self._run_in_executor(self._describe, path)

    async def get_base64(self, path: str) -> Base64Content | None:
        content = await self.get_raw(path)
        return to_base64(content) if content is not None else None

    async def get_thumbnail(self, path: str) -> FileContent | None:
        """Get the thumbnail derivative; non-image files come back unchanged."""
        return await self.get_derivative(path, ImageDerivativeSpec.thumbnail(self.settings))

    async def get_thumbnail_base64(self, path: str) -> Base64Content | None:
        content = await self.get_thumbnail(path)
        return to_base64(content) if content is not None else None

    async def get_mobile(
        self,
        path: str,
        max_width: int | None = None,
        max_height: int | None = None,
        quality: int | None = None,
    ) -> FileContent | None:
        """Get a mobile-sized derivative.

        Args:
            path: Requested path.
            max_width: Overrides the configured mobile width.
            max_height: Overrides the configured mobile height.
            quality: Overrides the configured compression quality (1-100).

        Raises:
            InvalidArgumentError: If an override is out of range. Raised
                before the file is touched.
        """
        spec = ImageDerivativeSpec.mobile(self.settings, max_width, max_height, quality)
        return await self.get_derivative(path, spec)

    async def get_mobile_base64(
        self,
        path: str,
        max_width: int | None = None,
        max_height: int | None = None,
        quality: int | None = None,
    ) -> Base64Content | None:
        content = await self.get_mobile(path, max_width, max_height, quality)
        return to_base64(content) if content is not None else None

    async def get_derivative(self, path: str, spec: ImageDerivativeSpec) -> FileContent | None:
        """Get a derivative for an already validated spec."""
        return await self._run_in_executor(self._derive, path, spec)

    async def list_files(self) -> list[FileMetadata]:
        """Describe every file under the storage root."""
        return await self._run_in_executor(self._list_files)

    def _load(self, path: str) -> FileContent | None:
        resolved = self.resolver.resolve(path)
        if resolved is None:
            logger.info("File not found", requested_path=path)
            return None
        return FileContent(
            content=self._read(resolved),
            content_type=self._classifier.classify(resolved.extension),
            file_name=resolved.name,
        )

    def _describe(self, path: str) -> FileMetadata | None:
        resolved = self.resolver.resolve(path)
        if resolved is None:
            logger.info("File not found", requested_path=path)
            return None
        return self._metadata_reader.describe(resolved)

    def _derive(self, path: str, spec: ImageDerivativeSpec) -> FileContent | None:
        original = self._load(path)
        if original is None:
            return None

        try:
            derived = self._transformer.transform(original.content, original.content_type, spec)
        except ImageTransformError as e:
            logger.warning(
                "Image transformation failed, serving original",
                requested_path=path,
                file_name=original.file_name,
                error=str(e),
            )
            return original

        return FileContent(
            content=derived,
            content_type=original.content_type,
            file_name=original.file_name,
        )

    def _list_files(self) -> list[FileMetadata]:
        return [self._metadata_reader.describe(resolved) for resolved in self.resolver.iter_files()]

    @staticmethod
    def _read(resolved: ResolvedFile) -> bytes:
        try:
            return resolved.absolute_path.read_bytes()
        except OSError as e:
            logger.error(
                "Failed to read file",
                relative_path=resolved.relative_path,
                error=str(e),
            )
            raise FileAccessError(resolved.relative_path, e) from e
