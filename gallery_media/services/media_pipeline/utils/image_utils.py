# gallery_media/services/media_pipeline/utils/image_utils.py
"""
Image Codec Utility Functions

Decode, describe, reshape and encode helpers shared by the validator and all
generators. Everything works on in-memory buffers.
"""

import io
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from ....constants import (
    FLATTEN_BACKGROUND,
    FORMAT_ALIASES,
    QUALITY_RANGES,
    WEBP_EFFORT,
)
from ....enums import ImageFormat
from ....exceptions import DecodeError, EncodeError
from ....models import ImageMetadata, ProcessedVariant

# Pillow raises any of these for truncated, corrupt or non-image data
DECODE_EXCEPTIONS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
)

# Guards Image.MAX_IMAGE_PIXELS, which is process-wide. Held while it is
# lifted for a header read and while open_image checks it.
_PIXEL_LIMIT_LOCK = threading.Lock()

COLOR_SPACES = {
    "1": "b-w",
    "L": "b-w",
    "LA": "b-w",
    "I": "b-w",
    "I;16": "b-w",
    "F": "b-w",
    "RGB": "srgb",
    "RGBA": "srgb",
    "RGBX": "srgb",
    "P": "srgb",
    "PA": "srgb",
    "CMYK": "cmyk",
    "YCbCr": "ycbcr",
    "LAB": "lab",
    "HSV": "hsv",
}


def normalize_format_name(pil_format: Optional[str]) -> str:
    """Lowercase Pillow format name with aliases folded (JPG/MPO -> jpeg)."""
    if not pil_format:
        return "unknown"
    name = pil_format.lower()
    return FORMAT_ALIASES.get(name, name)


def has_alpha_channel(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or (
        img.mode == "P" and "transparency" in img.info
    )


def open_image(buffer: bytes) -> Image.Image:
    """
    Fully decode an image buffer into a resampling-friendly pixel mode.

    Palette and exotic modes are expanded to RGB/RGBA so LANCZOS resizing
    applies; Pillow silently falls back to nearest-neighbour for "P" and "1".

    Raises:
        DecodeError: if the buffer is not a readable image
    """
    try:
        with _PIXEL_LIMIT_LOCK:
            img = Image.open(io.BytesIO(buffer))
        img.load()
    except DECODE_EXCEPTIONS as e:
        raise DecodeError(f"Invalid image file or corrupted data: {e}") from e

    if img.mode in ("RGB", "RGBA", "L", "LA"):
        return img
    return img.convert("RGBA" if has_alpha_channel(img) else "RGB")


def probe_image(buffer: bytes) -> ImageMetadata:
    """
    Verify a buffer's integrity and read its metadata without decoding pixels.

    Headers over Pillow's decompression bomb limit are still described, so
    callers see the real dimensions. Decoding such an image stays refused
    by open_image.

    Raises:
        DecodeError: if the buffer is not a readable image
    """
    try:
        try:
            return _read_header(buffer)
        except Image.DecompressionBombError:
            with _pixel_limit_lifted():
                return _read_header(buffer)
    except DECODE_EXCEPTIONS as e:
        raise DecodeError(f"Invalid image file or corrupted data: {e}") from e


def _read_header(buffer: bytes) -> ImageMetadata:
    with Image.open(io.BytesIO(buffer)) as img:
        img.verify()
    # verify() leaves the image unusable, reopen for the header fields
    with Image.open(io.BytesIO(buffer)) as img:
        return describe_image(img, len(buffer))


@contextmanager
def _pixel_limit_lifted() -> Iterator[None]:
    """Disable Image.MAX_IMAGE_PIXELS for a header read, then restore it."""
    with _PIXEL_LIMIT_LOCK:
        previous = Image.MAX_IMAGE_PIXELS
        Image.MAX_IMAGE_PIXELS = None
        try:
            yield
        finally:
            Image.MAX_IMAGE_PIXELS = previous


def describe_image(img: Image.Image, size: int) -> ImageMetadata:
    """Build ImageMetadata for an opened image."""
    dpi = img.info.get("dpi")
    density = int(round(dpi[0])) if dpi and dpi[0] else 72

    return ImageMetadata(
        width=img.width,
        height=img.height,
        format=normalize_format_name(img.format),
        color_space=COLOR_SPACES.get(img.mode, "unknown"),
        mode=img.mode,
        has_alpha=has_alpha_channel(img),
        size=size,
        density=density,
    )


def extract_metadata(buffer: bytes) -> ImageMetadata:
    """Public metadata reader, see probe_image."""
    return probe_image(buffer)


def calculate_fit_inside_dimensions(
    source_size: Tuple[int, int], max_size: Tuple[int, int]
) -> Tuple[int, int]:
    """
    Calculate dimensions that fit inside max_size preserving aspect ratio.

    Never enlarges: a source already inside the box is returned unchanged.

    Args:
        source_size: (width, height) of source image
        max_size: (width, height) of the bounding box

    Returns:
        (width, height) of the resized image
    """
    source_width, source_height = source_size
    max_width, max_height = max_size

    if source_width <= max_width and source_height <= max_height:
        return (source_width, source_height)

    scale = min(max_width / source_width, max_height / source_height)
    new_width = max(1, min(max_width, round(source_width * scale)))
    new_height = max(1, min(max_height, round(source_height * scale)))
    return (new_width, new_height)


def resize_to_cover(img: Image.Image, box: Tuple[int, int]) -> Image.Image:
    """Scale and center-crop so the result exactly fills box."""
    return ImageOps.fit(
        img, box, method=Image.Resampling.LANCZOS, centering=(0.5, 0.5)
    )


def resize_to_fit_inside(img: Image.Image, max_size: Tuple[int, int]) -> Image.Image:
    """Downscale into max_size when needed, otherwise return img untouched."""
    target = calculate_fit_inside_dimensions(img.size, max_size)
    if target == img.size:
        return img
    return img.resize(target, Image.Resampling.LANCZOS)


def validate_quality(image_format: ImageFormat, quality: int) -> None:
    """
    Raises:
        EncodeError: if quality is outside the encoder's accepted range
    """
    low, high = QUALITY_RANGES[image_format]
    if not isinstance(quality, int) or isinstance(quality, bool) or not low <= quality <= high:
        raise EncodeError(
            f"Quality {quality!r} is not valid for {image_format.value} (expected {low}-{high})"
        )


def prepare_for_format(img: Image.Image, image_format: ImageFormat) -> Image.Image:
    """
    Convert pixel mode to one the target encoder accepts.

    JPEG has no alpha, so transparent images are flattened onto white
    instead of letting the transparent pixels turn black.
    """
    if img.mode == "P":
        img = img.convert("RGBA" if has_alpha_channel(img) else "RGB")

    if image_format is ImageFormat.JPEG:
        if img.mode in ("RGB", "L"):
            return img
        if has_alpha_channel(img):
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, FLATTEN_BACKGROUND)
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background
        return img.convert("RGB")

    if img.mode in ("RGB", "RGBA", "L", "LA"):
        return img
    return img.convert("RGBA" if has_alpha_channel(img) else "RGB")


def encode_image(img: Image.Image, image_format: ImageFormat, quality: int) -> bytes:
    """
    Encode img at the target format.

    jpeg: progressive with optimized huffman tables. webp: fixed effort.
    png: quality is the zlib compression level.

    Raises:
        EncodeError: if the encoder rejects the image or parameters
    """
    validate_quality(image_format, quality)

    output = io.BytesIO()
    try:
        prepared = prepare_for_format(img, image_format)
        if image_format is ImageFormat.JPEG:
            prepared.save(
                output,
                image_format.pil_format,
                quality=quality,
                optimize=True,
                progressive=True,
            )
        elif image_format is ImageFormat.WEBP:
            prepared.save(
                output,
                image_format.pil_format,
                quality=quality,
                method=WEBP_EFFORT,
            )
        else:
            prepared.save(output, image_format.pil_format, compress_level=quality)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Failed to encode {image_format.value}: {e}") from e

    return output.getvalue()


def build_variant(buffer: bytes, image_format: ImageFormat) -> ProcessedVariant:
    """
    Wrap encoder output, reading dimensions back from the encoded bytes.

    Raises:
        EncodeError: if the encoder produced something that does not decode
    """
    try:
        with Image.open(io.BytesIO(buffer)) as encoded:
            width, height = encoded.size
    except DECODE_EXCEPTIONS as e:
        raise EncodeError(f"Encoded {image_format.value} output is unreadable: {e}") from e

    return ProcessedVariant(
        data=buffer,
        format=image_format,
        width=width,
        height=height,
        size=len(buffer),
    )
