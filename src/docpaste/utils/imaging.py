"""Image processing utilities for docpaste.

Decoding of captured frames and preprocessing that makes screenshots of
document editors easier for Tesseract to read.
"""

from __future__ import annotations

import io
import logging

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def decode_image(image_bytes: bytes) -> Image.Image:
    """Decode encoded image bytes (PNG, JPEG, ...) into an RGB PIL Image."""
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Failed to decode captured image: {e}") from e
    if image.mode != "RGB":
        image = image.convert("RGB")
    return image


def pil_to_numpy(image: Image.Image) -> np.ndarray:
    """Convert a PIL Image (RGB) to a numpy array (BGR)."""
    rgb_array = np.array(image)
    return cv2.cvtColor(rgb_array, cv2.COLOR_RGB2BGR)


def numpy_to_pil(image: np.ndarray) -> Image.Image:
    """Convert a numpy image array (BGR or grayscale) to a PIL Image."""
    if image.ndim == 2:
        return Image.fromarray(image)
    rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    return Image.fromarray(rgb)


def enhance_for_ocr(image: np.ndarray, min_width: int = 1600) -> np.ndarray:
    """Prepare a screenshot for Tesseract.

    Screenshots are already sharp, so unlike camera frames they are not
    binarized. The image is converted to grayscale, inverted when the
    editor uses a dark theme, and upscaled when narrower than
    ``min_width`` so small UI fonts reach a readable glyph height.
    """
    gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY) if image.ndim == 3 else image

    # Tesseract prefers dark text on a light background
    if np.mean(gray) < 110:
        gray = cv2.bitwise_not(gray)

    h, w = gray.shape[:2]
    if w < min_width:
        scale = min_width / w
        gray = cv2.resize(
            gray, (int(w * scale), int(h * scale)), interpolation=cv2.INTER_CUBIC
        )
        logger.debug("Upscaled capture from %dx%d by %.2f", w, h, scale)

    return gray
