"""OCR module for docpaste.

Turns captured document screenshots into filtered plain-text transcripts.
The abstract engine interface allows alternative OCR backends.

Public API:
    OcrEngine -- Abstract base class
    OcrExtractor -- Frame-to-transcript extraction with chrome filtering
    TesseractEngine -- pytesseract implementation
"""

from docpaste.ocr.base import ExtractionError, OcrEngine
from docpaste.ocr.extractor import OcrExtractor

__all__ = ["ExtractionError", "OcrEngine", "OcrExtractor", "TesseractEngine"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "TesseractEngine":
        from docpaste.ocr.tesseract import TesseractEngine
        return TesseractEngine
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
