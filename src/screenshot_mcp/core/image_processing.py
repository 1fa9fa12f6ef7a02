#!/usr/bin/env python3
"""
Image Processing for Screenshot Module

This module normalizes captured screenshots so that neither side exceeds the
maximum dimension accepted downstream. Oversized images are scaled down
proportionally using the more restrictive axis and re-encoded as PNG.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- PNG bytes of a 16000x8000 image, max_dimension=8000

Expected output:
- PNG bytes of an 8000x4000 image, plus (8000, 4000)
"""

import io
import math
from contextlib import contextmanager
from typing import Iterator, Tuple

from PIL import Image
from loguru import logger

from screenshot_mcp.core.constants import IMAGE_SETTINGS
from screenshot_mcp.core.errors import ImageMetadataError, ImageResizeError


@contextmanager
def _open_screenshot(image_bytes: bytes) -> Iterator[Image.Image]:
    """
    Opens screenshot bytes with Pillow's decompression bomb check lifted.

    Full-page captures of long documents exceed the default pixel limit, which
    Pillow checks when the image is opened. The previous limit is restored
    right after.
    """
    previous_limit = Image.MAX_IMAGE_PIXELS
    Image.MAX_IMAGE_PIXELS = None
    try:
        img = Image.open(io.BytesIO(image_bytes))
    finally:
        Image.MAX_IMAGE_PIXELS = previous_limit

    with img:
        yield img


def scaled_dimensions(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """
    Computes the target size for an image that must fit in a square box.

    Args:
        width: Current width
        height: Current height
        max_dimension: Maximum allowed width and height

    Returns:
        Tuple[int, int]: (width, height), unchanged if already within limits
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height

    scale = min(max_dimension / width, max_dimension / height)
    return math.floor(width * scale), math.floor(height * scale)


def resize_image_if_needed(
    img: Image.Image,
    max_dimension: int = IMAGE_SETTINGS["MAX_DIMENSION"],
) -> Image.Image:
    """
    Resizes an image if it exceeds the maximum dimension while preserving aspect ratio.

    Args:
        img: PIL Image object to resize
        max_dimension: Maximum width and height allowed

    Returns:
        PIL.Image: Resized image or original if no resize needed
    """
    width, height = img.size
    new_width, new_height = scaled_dimensions(width, height, max_dimension)
    if (new_width, new_height) == (width, height):
        return img

    logger.info(f"Resizing image from {width}x{height} to {new_width}x{new_height}")
    return img.resize((new_width, new_height), Image.LANCZOS)


def read_image_size(image_bytes: bytes) -> Tuple[int, int]:
    """
    Reads the pixel dimensions of encoded image bytes.

    Raises:
        ImageMetadataError: If the bytes cannot be decoded
    """
    try:
        with _open_screenshot(image_bytes) as img:
            return img.size
    except Exception as e:
        logger.error(f"Failed to read screenshot metadata: {str(e)}")
        raise ImageMetadataError(
            "Failed to read screenshot metadata", {"original_error": str(e)}
        ) from e


def normalize_image_size(
    image_bytes: bytes,
    max_dimension: int = IMAGE_SETTINGS["MAX_DIMENSION"],
) -> Tuple[bytes, int, int]:
    """
    Complete pipeline for normalizing a captured screenshot:
    1. Decode and read the dimensions
    2. Downscale proportionally if either side exceeds max_dimension
    3. Re-encode as PNG

    Images already within limits are returned byte-for-byte unchanged.

    Args:
        image_bytes: Encoded PNG screenshot
        max_dimension: Maximum width and height allowed

    Returns:
        Tuple[bytes, int, int]: Final PNG bytes, width and height

    Raises:
        ImageMetadataError: If the screenshot cannot be decoded
        ImageResizeError: If resizing or re-encoding fails
    """
    width, height = read_image_size(image_bytes)
    new_width, new_height = scaled_dimensions(width, height, max_dimension)
    if (new_width, new_height) == (width, height):
        return image_bytes, width, height

    try:
        with _open_screenshot(image_bytes) as img:
            resized = resize_image_if_needed(img, max_dimension)
            buffer = io.BytesIO()
            resized.save(buffer, format=IMAGE_SETTINGS["FORMAT"])
    except Exception as e:
        logger.error(f"Failed to resize screenshot image: {str(e)}")
        raise ImageResizeError(
            "Failed to resize screenshot image", {"original_error": str(e)}
        ) from e

    return buffer.getvalue(), new_width, new_height


if __name__ == "__main__":
    """Validate image processing functions with real test data"""
    import sys

    # List to track all validation failures
    all_validation_failures = []
    total_tests = 0

    def _png(size, mode="RGB"):
        buffer = io.BytesIO()
        Image.new(mode, size).save(buffer, format="PNG")
        return buffer.getvalue()

    # Test 1: Small image passes through untouched
    total_tests += 1
    small = _png((1920, 1080))
    result, width, height = normalize_image_size(small)
    if result is not small or (width, height) != (1920, 1080):
        all_validation_failures.append(f"Small image test: expected passthrough, got {width}x{height}")

    # Test 2: Oversized image is scaled on both axes
    total_tests += 1
    result, width, height = normalize_image_size(_png((16000, 8000), mode="1"))
    if (width, height) != (8000, 4000):
        all_validation_failures.append(f"Resize test: expected 8000x4000, got {width}x{height}")

    # Test 3: Garbage bytes raise ImageMetadataError
    total_tests += 1
    try:
        normalize_image_size(b"not an image")
        all_validation_failures.append("Metadata test: garbage bytes accepted")
    except ImageMetadataError:
        pass

    # Final validation result
    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)  # Exit with error code
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Image processing functions are validated and ready for use")
        sys.exit(0)  # Exit with success code
