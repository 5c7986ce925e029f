"""Unit tests for image normalization before upload."""

import base64
from io import BytesIO

import pytest
from PIL import Image

from fridgechef.models.errors import InvalidImageError
from fridgechef.services.images import (
    detect_image_format,
    encode_data_uri,
    prepare_image_for_upload,
    reencode_as_jpeg,
    validate_image_format,
    validate_image_size,
)
from fridgechef.utils.config import Config


def image_bytes(size=(64, 48), mode="RGB", fmt="PNG", color=(10, 20, 30)) -> bytes:
    output = BytesIO()
    Image.new(mode, size, color).save(output, format=fmt)
    return output.getvalue()


class TestFormatValidation:
    def test_detects_jpeg_and_png(self, jpeg_bytes, png_bytes):
        assert detect_image_format(jpeg_bytes) == "jpg"
        assert detect_image_format(png_bytes) == "png"

    def test_unknown_bytes(self):
        assert detect_image_format(b"definitely not an image") is None
        assert validate_image_format(b"definitely not an image") is False

    def test_supported_formats_validate(self, jpeg_bytes, png_bytes):
        assert validate_image_format(jpeg_bytes) is True
        assert validate_image_format(png_bytes) is True
        assert validate_image_format(image_bytes(fmt="GIF", mode="P", color=0)) is True

    def test_non_image_file_type_is_rejected(self):
        pdf = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<<>>\nendobj\n"
        assert validate_image_format(pdf) is False

    def test_size_limit(self):
        assert validate_image_size(b"x" * 1024, max_size_mb=1) is True
        assert validate_image_size(b"x" * (1024 * 1024 + 1), max_size_mb=1) is False


class TestReencodeAsJpeg:
    """Test Pillow re-encoding."""

    def test_output_is_jpeg(self, png_bytes):
        assert detect_image_format(reencode_as_jpeg(png_bytes)) == "jpg"

    def test_wide_image_is_downsized_keeping_aspect_ratio(self):
        result = reencode_as_jpeg(image_bytes(size=(2048, 1024)), max_width=1024)

        with Image.open(BytesIO(result)) as img:
            assert img.size == (1024, 512)

    def test_narrow_image_keeps_size(self):
        result = reencode_as_jpeg(image_bytes(size=(300, 200)), max_width=1024)

        with Image.open(BytesIO(result)) as img:
            assert img.size == (300, 200)

    def test_transparency_is_flattened_onto_white(self):
        transparent = image_bytes(mode="RGBA", color=(0, 0, 0, 0))

        with Image.open(BytesIO(reencode_as_jpeg(transparent))) as img:
            assert img.mode == "RGB"
            red, green, blue = img.getpixel((10, 10))
            assert min(red, green, blue) > 240

    def test_undecodable_bytes(self):
        with pytest.raises(InvalidImageError):
            reencode_as_jpeg(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)


class TestPrepareImageForUpload:
    """Test the validate → re-encode pipeline."""

    def test_empty_input(self, config):
        with pytest.raises(InvalidImageError, match="empty"):
            prepare_image_for_upload(b"", config)

    def test_unsupported_format(self, config):
        with pytest.raises(InvalidImageError, match="Invalid image format"):
            prepare_image_for_upload(b"hello world, not an image", config)

    def test_oversized_input(self, jpeg_bytes):
        config = Config(OPENAI_API_KEY="sk-x", MAX_IMAGE_SIZE_MB=1)
        oversized = jpeg_bytes + b"\x00" * (1024 * 1024)

        with pytest.raises(InvalidImageError, match="too large"):
            prepare_image_for_upload(oversized, config)

    def test_png_is_always_reencoded(self, config, png_bytes):
        assert detect_image_format(prepare_image_for_upload(png_bytes, config)) == "jpg"

    def test_small_jpeg_is_passed_through(self, config, jpeg_bytes):
        assert prepare_image_for_upload(jpeg_bytes, config) == jpeg_bytes

    def test_large_jpeg_is_recompressed(self, jpeg_bytes):
        config = Config(OPENAI_API_KEY="sk-x", COMPRESS_IMG_THRESHOLD_KB=0, MAX_IMAGE_WIDTH=32)

        result = prepare_image_for_upload(jpeg_bytes, config)

        with Image.open(BytesIO(result)) as img:
            assert img.width == 32

    def test_compression_disabled_keeps_jpeg(self, jpeg_bytes):
        config = Config(OPENAI_API_KEY="sk-x", COMPRESS_IMG=False, COMPRESS_IMG_THRESHOLD_KB=0)
        assert prepare_image_for_upload(jpeg_bytes, config) == jpeg_bytes


class TestEncodeDataUri:
    def test_data_uri_round_trips_bytes(self, jpeg_bytes):
        uri = encode_data_uri(jpeg_bytes)

        assert uri.startswith("data:image/jpeg;base64,")
        assert base64.b64decode(uri.split(",", 1)[1]) == jpeg_bytes
