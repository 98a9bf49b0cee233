# tests/unit/test_image_validator.py
"""
Unit tests for ImageValidator.

Every check runs on every buffer, except that a buffer which does not decode
skips the dimension and format checks.
"""

import pytest
from PIL import Image

from gallery_media.services.media_pipeline.validators import (
    CORRUPTED_IMAGE_REASON,
    ImageValidator,
)


@pytest.mark.unit
@pytest.mark.pipeline
class TestImageValidator:
    """Test suite for pre-flight image validation."""

    @pytest.fixture
    def validator(self):
        return ImageValidator()

    def test_valid_jpeg_has_no_reasons(self, validator, jpeg_bytes):
        result = validator.validate(jpeg_bytes)

        assert result.valid is True
        assert result.reasons == []
        assert result.metadata is not None
        assert result.metadata.width == 640
        assert result.metadata.height == 480
        assert result.metadata.format == "jpeg"

    @pytest.mark.parametrize("fmt,expected", [("PNG", "png"), ("WEBP", "webp"), ("GIF", "gif")])
    def test_default_allow_list(self, validator, image_factory, fmt, expected):
        result = validator.validate(image_factory(120, 90, fmt=fmt))

        assert result.valid
        assert result.metadata.format == expected

    def test_oversized_buffer_reports_size(self, image_factory):
        validator = ImageValidator(max_bytes=100)

        result = validator.validate(image_factory(64, 64))

        assert not result.valid
        assert len(result.reasons) == 1
        assert result.reasons[0].startswith("File size too large")
        # Size failure does not stop the decode-dependent checks
        assert result.metadata is not None

    def test_size_reason_uses_megabytes(self):
        validator = ImageValidator(max_bytes=10)

        result = validator.validate(b"x" * 11)

        assert "File size too large. Maximum size is " in result.reasons[0]

    def test_default_size_limit_is_ten_megabytes(self):
        validator = ImageValidator()

        result = validator.validate(b"\x00" * (10 * 1024 * 1024 + 1))

        assert result.reasons[0] == "File size too large. Maximum size is 10MB"

    def test_corrupt_data_is_single_reason(self, validator):
        result = validator.validate(b"definitely not an image")

        assert result.reasons == [CORRUPTED_IMAGE_REASON]
        assert result.metadata is None

    def test_empty_buffer_is_corrupt(self, validator):
        result = validator.validate(b"")

        assert result.reasons == [CORRUPTED_IMAGE_REASON]

    def test_corrupt_and_oversized_reports_both(self):
        validator = ImageValidator(max_bytes=5)

        result = validator.validate(b"garbage bytes")

        assert len(result.reasons) == 2
        assert result.reasons[0].startswith("File size too large")
        assert result.reasons[1] == CORRUPTED_IMAGE_REASON

    def test_width_and_height_limits_both_reported(self, image_factory):
        validator = ImageValidator(max_width=100, max_height=50)

        result = validator.validate(image_factory(200, 80))

        assert result.reasons == [
            "Image width too large. Maximum width is 100px",
            "Image height too large. Maximum height is 50px",
        ]

    def test_only_height_over_limit(self, image_factory):
        validator = ImageValidator(max_width=1000, max_height=100)

        result = validator.validate(image_factory(50, 200))

        assert result.reasons == ["Image height too large. Maximum height is 100px"]

    def test_format_outside_allow_list(self, image_factory):
        validator = ImageValidator(allowed_formats=["jpeg"])

        result = validator.validate(image_factory(40, 40, fmt="PNG"))

        assert result.reasons == ["Unsupported format. Allowed formats: jpeg"]

    def test_bmp_rejected_by_default(self, validator, image_factory):
        result = validator.validate(image_factory(40, 40, fmt="BMP"))

        assert len(result.reasons) == 1
        assert result.reasons[0].startswith("Unsupported format")

    def test_allow_list_accepts_jpg_alias(self, image_factory):
        validator = ImageValidator(allowed_formats=["JPG"])

        assert validator.validate(image_factory(40, 40)).valid

    def test_every_violation_collected(self, image_factory):
        validator = ImageValidator(
            max_bytes=10, max_width=10, max_height=10, allowed_formats=["webp"]
        )

        result = validator.validate(image_factory(40, 40, fmt="PNG"))

        assert len(result.reasons) == 4

    def test_metadata_reports_alpha(self, validator, image_factory):
        result = validator.validate(image_factory(30, 30, fmt="PNG", mode="RGBA"))

        assert result.metadata.has_alpha is True
        assert result.metadata.color_space == "srgb"

    def test_oversized_header_reports_dimensions(self, validator, oversized_png):
        result = validator.validate(oversized_png)

        assert result.reasons == [
            "Image width too large. Maximum width is 5000px",
            "Image height too large. Maximum height is 5000px",
        ]
        assert CORRUPTED_IMAGE_REASON not in result.reasons
        assert result.metadata.width == 20000
        assert result.metadata.height == 20000
        assert result.metadata.format == "png"

    def test_oversized_header_restores_pixel_limit(self, validator, oversized_png):
        limit = Image.MAX_IMAGE_PIXELS

        validator.validate(oversized_png)

        assert Image.MAX_IMAGE_PIXELS == limit
