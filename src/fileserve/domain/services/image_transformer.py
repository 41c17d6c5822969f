"""Image derivative generation with Pillow.

Images are shrunk to fit a bounding box, never enlarged, and re-encoded in
their source format. Non-raster content passes through unchanged.
"""

import io

from PIL import Image, ImageSequence

from fileserve.domain.entities.image import ImageDerivativeSpec, ImageFormat
from fileserve.domain.exceptions import ImageTransformError
from fileserve.domain.services.content_type_classifier import (
    ContentTypeClassifier,
    content_type_classifier,
)


# Modes JPEG can store directly; anything else is converted to RGB
_JPEG_MODES = {"RGB", "L", "CMYK"}
_WEBP_MODES = {"RGB", "RGBA"}

_DECODE_ERRORS = (OSError, ValueError, SyntaxError, EOFError, Image.DecompressionBombError)


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int] | None:
    """Compute floor-rounded dimensions that fit the box, keeping aspect ratio.

    Returns:
        The new (width, height), or None when the image already fits.
    """
    if width <= max_width and height <= max_height:
        return None

    # Integer comparison of max_width / width against max_height / height
    if max_width * height <= max_height * width:
        new_width = max_width
        new_height = height * max_width // width
    else:
        new_height = max_height
        new_width = width * max_height // height
    return max(1, new_width), max(1, new_height)


class ImageTransformer:
    """Resizes and recompresses raster images."""

    def __init__(self, classifier: ContentTypeClassifier | None = None) -> None:
        self._classifier = classifier or content_type_classifier

    def transform(self, data: bytes, content_type: str, spec: ImageDerivativeSpec) -> bytes:
        """Produce a derivative image.

        Args:
            data: Source file bytes.
            content_type: Source media type; decides format and eligibility.
            spec: Bounding box and quality.

        Returns:
            Encoded derivative bytes in the source format, or ``data`` itself
            for non-raster content.

        Raises:
            ImageTransformError: If decoding or encoding fails.
        """
        image_format = self._classifier.image_format(content_type)
        if not image_format.is_raster:
            return data

        try:
            with Image.open(io.BytesIO(data)) as image:
                if getattr(image, "is_animated", False) and image_format in (
                    ImageFormat.GIF,
                    ImageFormat.WEBP,
                ):
                    return self._transform_animated(image, image_format, spec)

                target = fit_within(image.width, image.height, spec.max_width, spec.max_height)
                frame = image if target is None else image.resize(target, Image.Resampling.LANCZOS)
                return self._encode(frame, image_format, spec.quality)
        except _DECODE_ERRORS as e:
            raise ImageTransformError(
                f"Failed to transform {image_format.value} image: {e}"
            ) from e

    def _transform_animated(
        self, image: Image.Image, image_format: ImageFormat, spec: ImageDerivativeSpec
    ) -> bytes:
        target = fit_within(image.width, image.height, spec.max_width, spec.max_height)
        frames: list[Image.Image] = []
        durations: list[int] = []
        for frame in ImageSequence.Iterator(image):
            durations.append(frame.info.get("duration", image.info.get("duration", 100)))
            copied = frame.copy()
            if target is not None:
                copied = copied.resize(target, Image.Resampling.LANCZOS)
            frames.append(self._prepare_mode(copied, image_format))

        output = io.BytesIO()
        frames[0].save(
            output,
            save_all=True,
            append_images=frames[1:],
            duration=durations,
            loop=image.info.get("loop", 0),
            **image_format.save_params(spec.quality),
        )
        return output.getvalue()

    def _encode(self, image: Image.Image, image_format: ImageFormat, quality: int) -> bytes:
        output = io.BytesIO()
        self._prepare_mode(image, image_format).save(output, **image_format.save_params(quality))
        return output.getvalue()

    @staticmethod
    def _prepare_mode(image: Image.Image, image_format: ImageFormat) -> Image.Image:
        if image_format is ImageFormat.JPEG and image.mode not in _JPEG_MODES:
            return image.convert("RGB")
        if image_format is ImageFormat.WEBP and image.mode not in _WEBP_MODES:
            has_alpha = image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info
            return image.convert("RGBA" if has_alpha else "RGB")
        return image
