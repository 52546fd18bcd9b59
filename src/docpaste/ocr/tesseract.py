"""Tesseract OCR engine implementation.

Uses pytesseract's ``image_to_data`` so words can be regrouped into
visual lines with an average confidence per line.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

import pytesseract
from PIL import Image

from docpaste.domain.models import TranscriptLine
from docpaste.ocr.base import ExtractionError, OcrEngine

logger = logging.getLogger(__name__)


class TesseractEngine(OcrEngine):
    """OCR engine backed by a local Tesseract installation."""

    def __init__(
        self,
        language: str = "eng",
        page_segmentation_mode: int = 6,
        tesseract_cmd: str | None = None,
    ) -> None:
        self._language = language
        self._psm = page_segmentation_mode
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    @property
    def name(self) -> str:
        return "tesseract"

    def recognize(self, image: Image.Image) -> list[TranscriptLine]:
        """Run Tesseract and group recognized words into lines."""
        try:
            data = pytesseract.image_to_data(
                image,
                lang=self._language,
                config=f"--psm {self._psm}",
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            raise ExtractionError(f"Tesseract failed: {e}", engine=self.name) from e

        lines = self._group_lines(data)
        logger.debug("Tesseract recognized %d lines", len(lines))
        return lines

    @staticmethod
    def _group_lines(data: dict) -> list[TranscriptLine]:
        """Group word-level ``image_to_data`` rows into lines."""
        grouped: OrderedDict[tuple[int, int, int, int], list[tuple[str, float]]] = OrderedDict()
        for i, word in enumerate(data.get("text", [])):
            word = (word or "").strip()
            if not word:
                continue
            key = (
                int(data["page_num"][i]),
                int(data["block_num"][i]),
                int(data["par_num"][i]),
                int(data["line_num"][i]),
            )
            grouped.setdefault(key, []).append((word, float(data["conf"][i])))

        lines = []
        for words in grouped.values():
            confidences = [conf for _, conf in words if conf >= 0]
            confidence = sum(confidences) / len(confidences) if confidences else None
            lines.append(
                TranscriptLine(
                    text=" ".join(word for word, _ in words),
                    confidence=confidence,
                )
            )
        return lines
