"""Image decoding and rendition utilities for film-gallery."""

import io
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from .exceptions import DecodeFailure, TransformFailure, UnsupportedFormat
from .models import GalleryConfig, ProcessedImage

JPEG_EXTS = {".jpg", ".jpeg"}
PNG_EXTS = {".png"}
SUPPORTED_EXTS = JPEG_EXTS | PNG_EXTS

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".json": "application/json",
}


def is_supported_image(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_EXTS


def ensure_supported_image(path: Union[str, Path]) -> None:
    """Raise ``UnsupportedFormat`` unless the extension is a supported raster type."""
    if not is_supported_image(path):
        raise UnsupportedFormat(path)


def guess_content_type(key: str) -> str:
    """Content type for an object key, by extension."""
    return CONTENT_TYPES.get(Path(key).suffix.lower(), "application/octet-stream")


def decode_image(data: bytes, source: str = "<bytes>") -> "Image.Image":
    """
    Decode image bytes and apply the EXIF orientation.

    Args:
        data: Raw encoded image bytes
        source: Name used in error messages

    Returns:
        A fully loaded PIL Image

    Raises:
        DecodeFailure: If Pillow cannot identify or decode the data
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
        return ImageOps.exif_transpose(image)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise DecodeFailure(f"Failed to decode image {source}: {e}") from e


def resize_to_bound(image: "Image.Image", max_dimension: int) -> "Image.Image":
    """
    Shrink an image so neither side exceeds ``max_dimension``.

    Aspect ratio is preserved and Lanczos resampling is used. Images already
    within the bound are returned as-is; nothing is ever enlarged.
    """
    width, height = image.size
    long_edge = max(width, height)
    if long_edge <= max_dimension:
        return image

    scale = max_dimension / float(long_edge)
    new_size = (max(1, round(width * scale)), max(1, round(height * scale)))
    return image.resize(new_size, Image.Resampling.LANCZOS)


def to_eight_bit(image: "Image.Image") -> "Image.Image":
    """
    Scale 16-bit grayscale (``I;16`` or ``I`` as Pillow opens it) down to ``L``.

    A plain ``convert`` clips every value above 255, so a 16-bit scan would
    come out white.
    """
    if image.mode == "I" or image.mode.startswith("I;16"):
        return image.convert("I").point(lambda value: value * (1 / 256)).convert("L")
    return image


def encode_jpeg(image: "Image.Image", quality: int) -> bytes:
    """Encode as an optimized progressive RGB JPEG, without metadata."""
    image = to_eight_bit(image)
    if image.mode != "RGB":
        image = image.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=int(quality), optimize=True, progressive=True)
    return buffer.getvalue()


def transform_image(
    image: "Image.Image",
    config: GalleryConfig,
    source_bytes: Optional[bytes] = None,
    source_extension: str = ".jpg",
) -> ProcessedImage:
    """
    Produce the original, preview and thumbnail renditions of a decoded image.

    The original rendition is the untouched ``source_bytes`` when they are
    given and ``config.reencode_originals`` is off; otherwise it is a
    full-resolution JPEG re-encode. Preview and thumbnail are always JPEG.

    Raises:
        TransformFailure: If resizing or encoding fails
    """
    width, height = image.size
    try:
        if source_bytes is not None and not config.reencode_originals:
            extension = source_extension.lower()
            if extension == ".jpeg":
                extension = ".jpg"
            original = source_bytes
        else:
            extension = ".jpg"
            original = encode_jpeg(image, config.original_quality)

        image = to_eight_bit(image)
        preview = encode_jpeg(
            resize_to_bound(image, config.preview_max_dimension), config.preview_quality
        )
        thumbnail = encode_jpeg(
            resize_to_bound(image, config.thumbnail_max_dimension),
            config.thumbnail_quality,
        )
    except (OSError, ValueError) as e:
        raise TransformFailure(f"Failed to render image ({width}x{height}): {e}") from e

    return ProcessedImage(
        original=original,
        preview=preview,
        thumbnail=thumbnail,
        width=width,
        height=height,
        original_extension=extension,
        original_content_type=guess_content_type(f"original{extension}"),
    )
