"""Tests for image decoding and OCR preprocessing."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from docpaste.utils.imaging import decode_image, enhance_for_ocr, numpy_to_pil, pil_to_numpy


class TestImaging:
    def test_decode_png(self, png_bytes: bytes) -> None:
        image = decode_image(png_bytes)
        assert image.mode == "RGB"
        assert image.size == (200, 100)

    def test_decode_converts_palette_images(self) -> None:
        buffer = io.BytesIO()
        Image.new("P", (4, 4)).save(buffer, format="PNG")
        assert decode_image(buffer.getvalue()).mode == "RGB"

    def test_decode_garbage_raises(self) -> None:
        with pytest.raises(ValueError):
            decode_image(b"\x00\x01garbage")

    def test_enhance_upscales_narrow_capture(self) -> None:
        image = np.full((50, 400, 3), 255, dtype=np.uint8)
        enhanced = enhance_for_ocr(image, min_width=1600)
        assert enhanced.ndim == 2
        assert enhanced.shape == (200, 1600)

    def test_enhance_inverts_dark_theme(self) -> None:
        image = np.zeros((10, 2000, 3), dtype=np.uint8)
        enhanced = enhance_for_ocr(image)
        assert enhanced.mean() == 255

    def test_round_trip_grayscale(self) -> None:
        gray = np.full((5, 5), 128, dtype=np.uint8)
        assert numpy_to_pil(gray).mode == "L"

    def test_pil_to_numpy_is_bgr(self) -> None:
        image = Image.new("RGB", (1, 1), (255, 0, 0))
        assert pil_to_numpy(image)[0, 0].tolist() == [0, 0, 255]
