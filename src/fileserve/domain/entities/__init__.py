"""Domain entities for FileServe.

Plain value objects created per request. None of them are persisted.
"""

from fileserve.domain.entities.batch import BatchItemResult, BatchOperation, BatchResponse
from fileserve.domain.entities.file import (
    Base64Content,
    FileContent,
    FileMetadata,
    ResolvedFile,
)
from fileserve.domain.entities.image import ImageDerivativeSpec, ImageFormat

__all__ = [
    "Base64Content",
    "BatchItemResult",
    "BatchOperation",
    "BatchResponse",
    "FileContent",
    "FileMetadata",
    "ImageDerivativeSpec",
    "ImageFormat",
    "ResolvedFile",
]
