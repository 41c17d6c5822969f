"""Pydantic schemas for file endpoints.

Responses use camelCase field names on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fileserve.domain.entities import Base64Content, FileMetadata


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Base64FileResponse(CamelModel):
    """Response schema for a base64 encoded file."""

    file_name: str = Field(..., description="Resolved file name, including any auto-detected extension")
    content_type: str = Field(..., description="MIME type of the file")
    base64_data: str = Field(..., description="Base64 encoded file content")

    @classmethod
    def from_content(cls, content: Base64Content) -> "Base64FileResponse":
        return cls(
            file_name=content.file_name,
            content_type=content.content_type,
            base64_data=content.base64_data,
        )


class FileMetadataResponse(CamelModel):
    """Response schema for file metadata."""

    file_name: str = Field(..., description="Path relative to the storage root")
    file_size: int = Field(..., description="File size in bytes")
    content_type: str = Field(..., description="MIME type of the file")
    created_at: datetime = Field(..., description="Creation time (UTC)")
    modified_at: datetime = Field(..., description="Last modification time (UTC)")

    @classmethod
    def from_metadata(cls, metadata: FileMetadata) -> "FileMetadataResponse":
        return cls(
            file_name=metadata.relative_path,
            file_size=metadata.size_bytes,
            content_type=metadata.content_type,
            created_at=metadata.created_at,
            modified_at=metadata.modified_at,
        )
