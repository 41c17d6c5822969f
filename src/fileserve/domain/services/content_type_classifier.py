"""Extension to media type mapping."""

from fileserve.domain.entities.image import ImageFormat

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_CONTENT_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".json": "application/json",
}

_IMAGE_FORMATS: dict[str, ImageFormat] = {
    "image/png": ImageFormat.PNG,
    "image/jpeg": ImageFormat.JPEG,
    "image/gif": ImageFormat.GIF,
    "image/webp": ImageFormat.WEBP,
}


class ContentTypeClassifier:
    """Static, total mapping from file extension to media type.

    Unknown extensions map to application/octet-stream; nothing here raises.
    """

    def classify(self, extension: str) -> str:
        """Return the media type for an extension (``".JPG"`` and ``"jpg"`` both work)."""
        ext = extension.strip().lower()
        if ext and not ext.startswith("."):
            ext = f".{ext}"
        return _CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)

    def image_format(self, content_type: str) -> ImageFormat:
        return _IMAGE_FORMATS.get(content_type.lower(), ImageFormat.OTHER)

    def is_raster(self, content_type: str) -> bool:
        """True if the transformer can resize this media type."""
        return self.image_format(content_type).is_raster


content_type_classifier = ContentTypeClassifier()
