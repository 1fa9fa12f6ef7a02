#!/usr/bin/env python3
"""
Unit tests for core/image_processing.py
"""

import io
import os
import sys
import unittest

from PIL import Image

# Add src directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from screenshot_mcp.core.errors import ImageMetadataError
from screenshot_mcp.core.image_processing import (
    normalize_image_size,
    read_image_size,
    resize_image_if_needed,
    scaled_dimensions,
)
from screenshot_mcp.tests.fakes import make_png


class TestScaledDimensions(unittest.TestCase):
    """Test cases for target size computation"""

    def test_within_limits(self):
        self.assertEqual(scaled_dimensions(8000, 8000, 8000), (8000, 8000))
        self.assertEqual(scaled_dimensions(1920, 1080, 8000), (1920, 1080))

    def test_more_restrictive_axis_wins(self):
        self.assertEqual(scaled_dimensions(16000, 8000, 8000), (8000, 4000))
        self.assertEqual(scaled_dimensions(1000, 20000, 8000), (400, 8000))

    def test_dimensions_are_floored(self):
        self.assertEqual(scaled_dimensions(3, 10, 5), (1, 5))


class TestNormalizeImageSize(unittest.TestCase):
    """Test cases for the resize pipeline"""

    def test_small_image_passes_through(self):
        png = make_png((1920, 1080))
        result, width, height = normalize_image_size(png)
        self.assertIs(result, png)
        self.assertEqual((width, height), (1920, 1080))

    def test_oversized_image_is_scaled(self):
        result, width, height = normalize_image_size(make_png((1600, 800)), max_dimension=800)
        self.assertEqual((width, height), (800, 400))
        with Image.open(io.BytesIO(result)) as img:
            self.assertEqual(img.format, "PNG")
            self.assertEqual(img.size, (800, 400))

    def test_tall_page_is_scaled_on_height(self):
        result, width, height = normalize_image_size(make_png((50, 16000), mode="1"))
        self.assertEqual((width, height), (25, 8000))

    def test_undecodable_bytes(self):
        with self.assertRaises(ImageMetadataError) as cm:
            normalize_image_size(b"definitely not a png")
        self.assertEqual(cm.exception.code.value, "IMAGE_METADATA_ERROR")

        with self.assertRaises(ImageMetadataError):
            read_image_size(b"")

    def test_resize_image_if_needed_returns_same_object(self):
        img = Image.new("RGB", (100, 50))
        self.assertIs(resize_image_if_needed(img, 100), img)
        self.assertEqual(resize_image_if_needed(img, 50).size, (50, 25))


class TestDecompressionLimit(unittest.TestCase):
    """Pillow's pixel limit is only lifted while screenshots are opened"""

    def setUp(self):
        self.default_limit = Image.MAX_IMAGE_PIXELS

    def tearDown(self):
        Image.MAX_IMAGE_PIXELS = self.default_limit

    def test_import_leaves_limit_in_place(self):
        self.assertIsNotNone(Image.MAX_IMAGE_PIXELS)

    def test_large_screenshot_decodes_and_limit_is_restored(self):
        Image.MAX_IMAGE_PIXELS = 100
        png = make_png((16000, 100), mode="1")

        self.assertEqual(read_image_size(png), (16000, 100))
        _, width, height = normalize_image_size(png)

        self.assertEqual((width, height), (8000, 50))
        self.assertEqual(Image.MAX_IMAGE_PIXELS, 100)
        with self.assertRaises(Image.DecompressionBombError):
            Image.open(io.BytesIO(png))


if __name__ == "__main__":
    unittest.main()
