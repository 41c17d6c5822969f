"""File API endpoints: raw files, metadata, base64 and image derivatives.

All paths are relative to the storage root and may omit the file extension,
in which case the configured extensions are tried in order.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from fileserve.core.config import Settings
from fileserve.core.logging import get_logger
from fileserve.domain.entities import FileContent
from fileserve.domain.exceptions import InvalidArgumentError
from fileserve.infrastructure.api.dependencies import (
    FileServiceDep,
    SettingsDep,
    require_authorized_caller,
)
from fileserve.infrastructure.api.schemas import Base64FileResponse, FileMetadataResponse

logger = get_logger(__name__)

router = APIRouter(tags=["files"], dependencies=[Depends(require_authorized_caller)])

_ERROR_RESPONSES = {
    400: {"description": "File path is required or a parameter is invalid"},
    404: {"description": "File not found"},
    500: {"description": "Server error occurred"},
}

MaxWidthQuery = Annotated[int | None, Query(alias="maxWidth", description="Maximum width (default from config)")]
MaxHeightQuery = Annotated[int | None, Query(alias="maxHeight", description="Maximum height (default from config)")]
QualityQuery = Annotated[int | None, Query(description="Compression quality 1-100 (default from config)")]


@contextmanager
def retrieval_errors(what: str, file_path: str) -> Iterator[None]:
    """Translate service errors into HTTP errors for one retrieval."""
    try:
        yield
    except InvalidArgumentError as e:
        logger.warning("Invalid file request", file_path=file_path, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(
            f"Error retrieving {what}",
            file_path=file_path,
            error=str(e),
            exc_type=type(e).__name__,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while retrieving the {what}",
        )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")


def cache_headers(settings: Settings) -> dict[str, str]:
    if not settings.enable_response_caching:
        return {}
    return {"Cache-Control": f"public, max-age={settings.cache_duration_seconds}"}


def content_disposition(file_name: str) -> str:
    quoted = quote(file_name)
    if quoted != file_name:
        return f"inline; filename*=utf-8''{quoted}"
    return f'inline; filename="{file_name}"'


def file_response(content: FileContent, settings: Settings) -> Response:
    headers = {"Content-Disposition": content_disposition(content.file_name)}
    headers.update(cache_headers(settings))
    return Response(content=content.content, media_type=content.content_type, headers=headers)


def json_with_cache(response: Response, settings: Settings) -> None:
    response.headers.update(cache_headers(settings))


@router.get(
    "/base64/{file_path:path}",
    response_model=Base64FileResponse,
    summary="Get a file as base64",
    description="Returns fileName, contentType and base64Data for the file.",
    responses=_ERROR_RESPONSES,
)
async def get_file_as_base64(
    file_path: str, response: Response, service: FileServiceDep, settings: SettingsDep
) -> Base64FileResponse:
    with retrieval_errors("file", file_path):
        result = await service.get_base64(file_path)
    if result is None:
        raise _not_found()
    json_with_cache(response, settings)
    return Base64FileResponse.from_content(result)


@router.get(
    "/thumbnail/base64/{file_path:path}",
    response_model=Base64FileResponse,
    summary="Get a thumbnail as base64",
    responses=_ERROR_RESPONSES,
)
async def get_thumbnail_as_base64(
    file_path: str, response: Response, service: FileServiceDep, settings: SettingsDep
) -> Base64FileResponse:
    with retrieval_errors("thumbnail", file_path):
        result = await service.get_thumbnail_base64(file_path)
    if result is None:
        raise _not_found()
    json_with_cache(response, settings)
    return Base64FileResponse.from_content(result)


@router.get(
    "/thumbnail/{file_path:path}",
    response_class=Response,
    summary="Get a thumbnail",
    description=(
        "Returns the image shrunk to the configured thumbnail size, keeping its "
        "aspect ratio. Non-image files are returned as-is."
    ),
    responses=_ERROR_RESPONSES,
)
async def get_thumbnail(file_path: str, service: FileServiceDep, settings: SettingsDep) -> Response:
    with retrieval_errors("thumbnail", file_path):
        result = await service.get_thumbnail(file_path)
    if result is None:
        raise _not_found()
    return file_response(result, settings)


@router.get(
    "/mobile/base64/{file_path:path}",
    response_model=Base64FileResponse,
    summary="Get a mobile-sized image as base64",
    responses=_ERROR_RESPONSES,
)
async def get_mobile_image_as_base64(
    file_path: str,
    response: Response,
    service: FileServiceDep,
    settings: SettingsDep,
    max_width: MaxWidthQuery = None,
    max_height: MaxHeightQuery = None,
    quality: QualityQuery = None,
) -> Base64FileResponse:
    with retrieval_errors("mobile image", file_path):
        result = await service.get_mobile_base64(file_path, max_width, max_height, quality)
    if result is None:
        raise _not_found()
    json_with_cache(response, settings)
    return Base64FileResponse.from_content(result)


@router.get(
    "/mobile/{file_path:path}",
    response_class=Response,
    summary="Get a mobile-sized image",
    description=(
        "Returns the image shrunk to fit maxWidth x maxHeight and recompressed. "
        "Images are only resized if they exceed the dimensions. "
        "Non-image files are returned as-is."
    ),
    responses=_ERROR_RESPONSES,
)
async def get_mobile_image(
    file_path: str,
    service: FileServiceDep,
    settings: SettingsDep,
    max_width: MaxWidthQuery = None,
    max_height: MaxHeightQuery = None,
    quality: QualityQuery = None,
) -> Response:
    with retrieval_errors("mobile image", file_path):
        result = await service.get_mobile(file_path, max_width, max_height, quality)
    if result is None:
        raise _not_found()
    return file_response(result, settings)


@router.get(
    "/{file_path:path}/metadata",
    response_model=FileMetadataResponse,
    summary="Get file metadata",
    responses=_ERROR_RESPONSES,
)
async def get_file_metadata(
    file_path: str, response: Response, service: FileServiceDep, settings: SettingsDep
) -> FileMetadataResponse:
    with retrieval_errors("file metadata", file_path):
        metadata = await service.get_metadata(file_path)
    if metadata is None:
        raise _not_found()
    json_with_cache(response, settings)
    return FileMetadataResponse.from_metadata(metadata)


@router.get(
    "/{file_path:path}",
    response_class=Response,
    summary="Get a file",
    description="Returns the raw file with its content type.",
    responses=_ERROR_RESPONSES,
)
async def get_file(file_path: str, service: FileServiceDep, settings: SettingsDep) -> Response:
    with retrieval_errors("file", file_path):
        result = await service.get_raw(file_path)
    if result is None:
        raise _not_found()
    return file_response(result, settings)
