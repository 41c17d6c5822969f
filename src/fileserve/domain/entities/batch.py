"""Batch retrieval entities."""

from dataclasses import dataclass, field
from enum import Enum


class BatchOperation(str, Enum):
    """What a batch does to each requested path. Every result is base64."""

    BASE64 = "base64"
    THUMBNAIL = "thumbnail"
    MOBILE = "mobile"


@dataclass(slots=True)
class BatchItemResult:
    """Outcome of one path in a batch; failures are recorded, not raised."""

    requested_path: str
    found: bool = False
    file_name: str | None = None
    content_type: str | None = None
    base64_data: str | None = None
    error: str | None = None


@dataclass
class BatchResponse:
    """All item results of a batch, in request order.

    Counts are derived from items and cannot be set independently.
    """

    items: list[BatchItemResult] = field(default_factory=list)

    @property
    def total_requested(self) -> int:
        return len(self.items)

    @property
    def total_found(self) -> int:
        return sum(1 for item in self.items if item.found)

    @property
    def total_not_found(self) -> int:
        return self.total_requested - self.total_found
