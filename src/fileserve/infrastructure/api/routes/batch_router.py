"""Batch file API endpoints.

Each endpoint processes every requested path concurrently and reports a
per-file result; one missing or failing file never fails the batch.
"""

from collections.abc import Sequence

from fastapi import APIRouter, Depends, HTTPException, status

from fileserve.core.logging import get_logger
from fileserve.domain.entities import BatchOperation
from fileserve.domain.exceptions import InvalidArgumentError
from fileserve.domain.services import BatchOrchestrator
from fileserve.infrastructure.api.dependencies import (
    BatchOrchestratorDep,
    require_authorized_caller,
)
from fileserve.infrastructure.api.schemas import (
    BatchFileRequest,
    BatchFileResponse,
    BatchMobileRequest,
)

logger = get_logger(__name__)

router = APIRouter(tags=["batch"], dependencies=[Depends(require_authorized_caller)])


async def _run_batch(
    orchestrator: BatchOrchestrator,
    file_paths: Sequence[str],
    operation: BatchOperation,
    max_width: int | None = None,
    max_height: int | None = None,
    quality: int | None = None,
) -> BatchFileResponse:
    try:
        response = await orchestrator.run_batch(
            file_paths,
            operation,
            max_width=max_width,
            max_height=max_height,
            quality=quality,
        )
    except InvalidArgumentError as e:
        logger.warning(
            "Batch request validation failed",
            operation=operation.value,
            count=len(file_paths),
            error=str(e),
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return BatchFileResponse.from_response(response)


@router.post(
    "/base64",
    response_model=BatchFileResponse,
    summary="Get multiple files as base64",
)
async def get_files_as_base64(
    request: BatchFileRequest, orchestrator: BatchOrchestratorDep
) -> BatchFileResponse:
    return await _run_batch(orchestrator, request.file_paths, BatchOperation.BASE64)


@router.post(
    "/thumbnail",
    response_model=BatchFileResponse,
    summary="Get thumbnails of multiple files as base64",
)
async def get_thumbnails_as_base64(
    request: BatchFileRequest, orchestrator: BatchOrchestratorDep
) -> BatchFileResponse:
    return await _run_batch(orchestrator, request.file_paths, BatchOperation.THUMBNAIL)


@router.post(
    "/mobile",
    response_model=BatchFileResponse,
    summary="Get mobile-sized versions of multiple files as base64",
    description="maxWidth, maxHeight and quality apply to every file in the batch.",
)
async def get_mobile_images_as_base64(
    request: BatchMobileRequest, orchestrator: BatchOrchestratorDep
) -> BatchFileResponse:
    return await _run_batch(
        orchestrator,
        request.file_paths,
        BatchOperation.MOBILE,
        max_width=request.max_width,
        max_height=request.max_height,
        quality=request.quality,
    )
