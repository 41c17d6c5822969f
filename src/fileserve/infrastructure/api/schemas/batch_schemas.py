"""Pydantic schemas for batch file endpoints."""

from pydantic import Field

from fileserve.domain.entities import BatchItemResult, BatchResponse
from fileserve.infrastructure.api.schemas.file_schemas import CamelModel


class BatchFileRequest(CamelModel):
    """Request schema for batch retrieval.

    An empty list is rejected by the orchestrator with a 400.
    """

    file_paths: list[str] = Field(
        ...,
        description="Paths relative to the storage root; extensions may be omitted",
    )


class BatchMobileRequest(BatchFileRequest):
    """Request schema for batch mobile retrieval.

    Overrides apply to every file in the batch. Range checks happen in the
    service so that violations are reported as 400.
    """

    max_width: int | None = Field(default=None, description="Maximum width in pixels")
    max_height: int | None = Field(default=None, description="Maximum height in pixels")
    quality: int | None = Field(default=None, description="Compression quality, 1-100")


class BatchFileItem(CamelModel):
    """Outcome for one requested path."""

    requested_path: str
    found: bool
    file_name: str | None = None
    content_type: str | None = None
    base64_data: str | None = None
    error: str | None = None

    @classmethod
    def from_result(cls, result: BatchItemResult) -> "BatchFileItem":
        return cls(
            requested_path=result.requested_path,
            found=result.found,
            file_name=result.file_name,
            content_type=result.content_type,
            base64_data=result.base64_data,
            error=result.error,
        )


class BatchFileResponse(CamelModel):
    """Response schema for batch retrieval, items in request order."""

    files: list[BatchFileItem]
    total_requested: int
    total_found: int
    total_not_found: int

    @classmethod
    def from_response(cls, response: BatchResponse) -> "BatchFileResponse":
        return cls(
            files=[BatchFileItem.from_result(item) for item in response.items],
            total_requested=response.total_requested,
            total_found=response.total_found,
            total_not_found=response.total_not_found,
        )
