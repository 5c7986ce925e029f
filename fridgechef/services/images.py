"""Image normalization before upload.

The vision request always carries a `data:image/jpeg;base64,...` URI, so
every image leaves this module as JPEG bytes:
- validate_image_format(): Check the magic bytes against supported formats
- validate_image_size(): Check MAX_IMAGE_SIZE_MB limit
- reencode_as_jpeg(): Flatten transparency, downsize, re-encode with Pillow
- prepare_image_for_upload(): Validate, then re-encode when needed
- encode_data_uri(): Base64 data URI for the request payload

No content-level preprocessing (cropping, enhancement) happens here.
"""

import base64
from io import BytesIO
from typing import Optional

import filetype
from PIL import Image, UnidentifiedImageError

from fridgechef.models.errors import InvalidImageError
from fridgechef.utils.config import Config
from fridgechef.utils.logger import logger

# filetype extensions Pillow can decode without extra plugins
SUPPORTED_FORMATS = ("jpg", "png", "webp", "gif", "bmp", "tif")


def detect_image_format(image_bytes: bytes) -> Optional[str]:
    """Detect image format from magic bytes, not from a file extension.

    Returns:
        filetype extension (e.g. "jpg", "png") or None if unknown.
    """
    kind = filetype.guess(image_bytes)
    return kind.extension if kind is not None else None


def validate_image_format(image_bytes: bytes) -> bool:
    """Validate image format against SUPPORTED_FORMATS.

    Args:
        image_bytes: Raw image bytes.

    Returns:
        True if valid format, False otherwise.
    """
    extension = detect_image_format(image_bytes)
    if extension not in SUPPORTED_FORMATS:
        logger.warning(f"Invalid image format: {extension}. Supported: {', '.join(SUPPORTED_FORMATS)}")
        return False
    return True


def validate_image_size(image_bytes: bytes, max_size_mb: int) -> bool:
    """Validate image size against the configured limit.

    Args:
        image_bytes: Raw image bytes.
        max_size_mb: Maximum accepted size in MB.

    Returns:
        True if size valid, False if exceeds limit.
    """
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > max_size_mb:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {max_size_mb}MB")
        return False
    return True


def reencode_as_jpeg(image_bytes: bytes, max_width: int = 1024, quality: int = 80) -> bytes:
    """Re-encode an image as JPEG using Pillow.

    Converts color modes to RGB (transparent areas become white), resizes
    images wider than max_width keeping the aspect ratio, and saves with
    optimize + progressive.

    Args:
        image_bytes: Raw image bytes in any Pillow-readable format.
        max_width: Maximum image width in pixels.
        quality: JPEG quality (1-95).

    Returns:
        JPEG bytes.

    Raises:
        InvalidImageError: If Pillow cannot decode the image.
    """
    try:
        img = Image.open(BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise InvalidImageError(f"Could not decode image: {e}") from e

    original_size_kb = len(image_bytes) / 1024

    # Flatten transparency onto white, everything else straight to RGB
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba_img = img.convert("RGBA")
        rgb_img = Image.new("RGB", rgba_img.size, (255, 255, 255))
        rgb_img.paste(rgba_img, mask=rgba_img.split()[-1])
        img = rgb_img
    elif img.mode != "RGB":
        img = img.convert("RGB")

    if img.width > max_width:
        ratio = max_width / img.width
        new_height = max(1, int(img.height * ratio))
        img = img.resize((max_width, new_height), Image.Resampling.LANCZOS)

    output = BytesIO()
    try:
        img.save(output, format="JPEG", quality=quality, optimize=True, progressive=True)
    except (OSError, ValueError) as e:
        raise InvalidImageError(f"Could not encode image as JPEG: {e}") from e
    jpeg_bytes = output.getvalue()

    logger.debug(
        f"Image re-encoded: {original_size_kb:.1f}KB → {len(jpeg_bytes) / 1024:.1f}KB "
        f"({img.width}x{img.height}, quality={quality})"
    )
    return jpeg_bytes


def prepare_image_for_upload(image_bytes: bytes, config: Config) -> bytes:
    """Validate → (optionally) re-encode, producing JPEG bytes for upload.

    Non-JPEG input is always re-encoded. JPEG input is passed through unless
    COMPRESS_IMG is on and it is larger than COMPRESS_IMG_THRESHOLD_KB.

    Args:
        image_bytes: Raw image bytes from the caller.
        config: Application configuration.

    Returns:
        JPEG bytes.

    Raises:
        InvalidImageError: Empty input, unsupported format, oversized input,
        or bytes Pillow cannot decode.
    """
    if not image_bytes:
        raise InvalidImageError("Image is empty")

    if not validate_image_format(image_bytes):
        raise InvalidImageError(
            f"Invalid image format. Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )

    if not validate_image_size(image_bytes, config.MAX_IMAGE_SIZE_MB):
        raise InvalidImageError(f"Image too large. Maximum size is {config.MAX_IMAGE_SIZE_MB}MB")

    if detect_image_format(image_bytes) != "jpg":
        return reencode_as_jpeg(image_bytes, config.MAX_IMAGE_WIDTH, config.JPEG_QUALITY)

    size_kb = len(image_bytes) / 1024
    if config.COMPRESS_IMG and size_kb > config.COMPRESS_IMG_THRESHOLD_KB:
        return reencode_as_jpeg(image_bytes, config.MAX_IMAGE_WIDTH, config.JPEG_QUALITY)

    logger.debug(f"JPEG of {size_kb:.1f}KB sent unchanged (threshold {config.COMPRESS_IMG_THRESHOLD_KB}KB)")
    return image_bytes


def encode_data_uri(jpeg_bytes: bytes) -> str:
    """Base64-encode JPEG bytes as a data URI."""
    return f"data:image/jpeg;base64,{base64.b64encode(jpeg_bytes).decode('ascii')}"
