"""Image format and derivative specification value objects."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from fileserve.domain.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from fileserve.core.config import Settings


class ImageFormat(str, Enum):
    """Raster formats the transformer can re-encode, plus OTHER for everything else."""

    PNG = "PNG"
    JPEG = "JPEG"
    GIF = "GIF"
    WEBP = "WEBP"
    OTHER = "OTHER"

    @property
    def is_raster(self) -> bool:
        return self is not ImageFormat.OTHER

    @property
    def is_lossy(self) -> bool:
        return self in (ImageFormat.JPEG, ImageFormat.WEBP)

    def save_params(self, quality: int) -> dict[str, Any]:
        """Pillow ``Image.save`` keyword arguments for this format.

        Lossless formats ignore quality and use Pillow's defaults.
        """
        if self is ImageFormat.OTHER:
            raise ValueError("OTHER is not an encodable image format")
        params: dict[str, Any] = {"format": self.value}
        if self.is_lossy:
            params["quality"] = quality
        return params


def _validate_quality(quality: int) -> None:
    if not 1 <= quality <= 100:
        raise InvalidArgumentError("Quality must be between 1 and 100")


def _validate_dimension(name: str, value: int) -> None:
    if value < 1:
        raise InvalidArgumentError(f"{name} must be a positive integer")


@dataclass(frozen=True, slots=True)
class ImageDerivativeSpec:
    """Bounding box and quality for one derivative image.

    Images are only ever shrunk to fit inside max_width x max_height.
    """

    max_width: int
    max_height: int
    quality: int

    def __post_init__(self) -> None:
        _validate_dimension("Max width", self.max_width)
        _validate_dimension("Max height", self.max_height)
        _validate_quality(self.quality)

    @classmethod
    def thumbnail(cls, settings: "Settings") -> "ImageDerivativeSpec":
        return cls(
            max_width=settings.thumbnail_max_width,
            max_height=settings.thumbnail_max_height,
            quality=settings.compression_quality,
        )

    @classmethod
    def mobile(
        cls,
        settings: "Settings",
        max_width: int | None = None,
        max_height: int | None = None,
        quality: int | None = None,
    ) -> "ImageDerivativeSpec":
        """Mobile preset with optional caller overrides.

        Raises:
            InvalidArgumentError: If an override is out of range.
        """
        return cls(
            max_width=settings.mobile_max_width if max_width is None else max_width,
            max_height=settings.mobile_max_height if max_height is None else max_height,
            quality=settings.compression_quality if quality is None else quality,
        )
