"""Abstract base class for OCR engines.

All OCR engine implementations must conform to this interface, enabling
the extractor to swap between Tesseract, a cloud OCR service, or a
canned engine in tests without changing the rest of the pipeline.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from PIL import Image

from docpaste.domain.errors import PipelineError
from docpaste.domain.models import TranscriptLine

logger = logging.getLogger(__name__)


class OcrEngine(ABC):
    """Abstract interface for recognizing text in an image.

    Implementations are synchronous and may block for seconds; the
    orchestrator runs them in a worker thread.

    Example usage::

        engine = TesseractEngine(language="eng")
        lines = engine.recognize(image)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in logs and error messages."""
        ...

    @abstractmethod
    def recognize(self, image: Image.Image) -> list[TranscriptLine]:
        """Recognize text in an image, one entry per visual line.

        Args:
            image: The preprocessed image to read.

        Returns:
            Recognized lines in reading order, with per-line confidence
            (0-100) when the engine reports one.

        Raises:
            ExtractionError: If the engine fails.
        """
        ...


class ExtractionError(PipelineError):
    """Raised when OCR fails or yields no usable content."""

    code = "EXTRACTION_FAILED"

    def __init__(self, message: str, engine: str = "", code: str | None = None) -> None:
        super().__init__(message, code=code)
        self.engine = engine
