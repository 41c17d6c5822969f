"""Concurrent multi-file retrieval with per-item failure isolation."""

import asyncio
from collections.abc import Sequence

from fileserve.core.logging import get_logger
from fileserve.domain.entities.batch import BatchItemResult, BatchOperation, BatchResponse
from fileserve.domain.entities.image import ImageDerivativeSpec
from fileserve.domain.exceptions import InvalidArgumentError
from fileserve.domain.services.file_retrieval_service import FileRetrievalService, to_base64

logger = get_logger(__name__)

NOT_FOUND_ERROR = "File not found"
UNEXPECTED_ERROR = "An error occurred while retrieving the file"


class BatchOrchestrator:
    """Fans a list of paths out to FileRetrievalService and aggregates the results.

    Owns no state beyond its collaborators; every batch is independent.
    """

    def __init__(self, retrieval_service: FileRetrievalService, max_items: int | None = None) -> None:
        self._service = retrieval_service
        self._max_items = max_items or retrieval_service.settings.batch_max_items

    async def run_batch(
        self,
        paths: Sequence[str],
        operation: BatchOperation,
        max_width: int | None = None,
        max_height: int | None = None,
        quality: int | None = None,
    ) -> BatchResponse:
        """Run one operation over every path concurrently.

        Dimension and quality overrides apply to the mobile operation and are
        shared by every item. Output items keep the input order.

        Raises:
            InvalidArgumentError: If the batch is empty, exceeds the configured
                item cap, or an override is out of range. Nothing runs then.
        """
        if not paths:
            raise InvalidArgumentError("At least one file path is required")
        if len(paths) > self._max_items:
            raise InvalidArgumentError(
                f"A batch may contain at most {self._max_items} file paths, got {len(paths)}"
            )

        spec: ImageDerivativeSpec | None = None
        if operation is BatchOperation.THUMBNAIL:
            spec = ImageDerivativeSpec.thumbnail(self._service.settings)
        elif operation is BatchOperation.MOBILE:
            spec = ImageDerivativeSpec.mobile(self._service.settings, max_width, max_height, quality)

        items = await asyncio.gather(*(self._run_item(path, spec) for path in paths))
        response = BatchResponse(items=list(items))

        logger.info(
            "Batch completed",
            operation=operation.value,
            total_requested=response.total_requested,
            total_found=response.total_found,
            total_not_found=response.total_not_found,
        )
        return response

    async def _run_item(self, path: str, spec: ImageDerivativeSpec | None) -> BatchItemResult:
        try:
            if spec is None:
                content = await self._service.get_base64(path)
            else:
                derived = await self._service.get_derivative(path, spec)
                content = to_base64(derived) if derived is not None else None
        except InvalidArgumentError as e:
            return BatchItemResult(requested_path=path, error=str(e))
        except Exception as e:
            logger.error(
                "Batch item failed",
                requested_path=path,
                error=str(e),
                exc_type=type(e).__name__,
            )
            return BatchItemResult(requested_path=path, error=UNEXPECTED_ERROR)

        if content is None:
            return BatchItemResult(requested_path=path, error=NOT_FOUND_ERROR)

        return BatchItemResult(
            requested_path=path,
            found=True,
            file_name=content.file_name,
            content_type=content.content_type,
            base64_data=content.base64_data,
        )
