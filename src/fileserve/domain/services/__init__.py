"""Domain services for FileServe.

Path resolution, metadata, content typing, image derivatives, and the
single-file and batch retrieval services built on them.
"""

from fileserve.domain.services.batch_orchestrator import BatchOrchestrator
from fileserve.domain.services.content_type_classifier import (
    ContentTypeClassifier,
    content_type_classifier,
)
from fileserve.domain.services.file_retrieval_service import FileRetrievalService
from fileserve.domain.services.image_transformer import ImageTransformer, fit_within
from fileserve.domain.services.metadata_reader import MetadataReader
from fileserve.domain.services.path_resolver import PathResolver

__all__ = [
    "BatchOrchestrator",
    "ContentTypeClassifier",
    "FileRetrievalService",
    "ImageTransformer",
    "MetadataReader",
    "PathResolver",
    "content_type_classifier",
    "fit_within",
]
