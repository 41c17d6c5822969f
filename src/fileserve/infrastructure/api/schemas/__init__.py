"""API request/response schemas."""

from fileserve.infrastructure.api.schemas.batch_schemas import (
    BatchFileItem,
    BatchFileRequest,
    BatchFileResponse,
    BatchMobileRequest,
)
from fileserve.infrastructure.api.schemas.file_schemas import (
    Base64FileResponse,
    FileMetadataResponse,
)

__all__ = [
    "Base64FileResponse",
    "BatchFileItem",
    "BatchFileRequest",
    "BatchFileResponse",
    "BatchMobileRequest",
    "FileMetadataResponse",
]
