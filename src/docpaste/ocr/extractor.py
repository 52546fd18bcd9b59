"""Transcript extraction from captured frames.

Runs an OCR engine over a captured document screenshot and filters out
the editor's own interface (menus, toolbars, status labels) so the
rewriting step sees the user's content rather than UI chrome.

The filter is conservative: a line is dropped only when it matches a
high-confidence chrome signature. Short genuine lines such as one-word
headings survive, and whatever chrome leaks through is left for the
rewriting step to ignore.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from docpaste.config.settings import DEFAULT_CHROME_KEYWORDS
from docpaste.domain.models import CaptureFrame, Transcript, TranscriptLine
from docpaste.ocr.base import ExtractionError, OcrEngine
from docpaste.utils.imaging import decode_image, enhance_for_ocr, numpy_to_pil, pil_to_numpy

logger = logging.getLogger(__name__)

# Three or more symbols and nothing else: rulers, separators, icon glyphs
_SYMBOL_RUN_RE = re.compile(r"^[^A-Za-z0-9\s]{3,}$")


def build_chrome_pattern(keywords: Iterable[str]) -> re.Pattern[str] | None:
    """Compile chrome keywords into one line-start, whole-word pattern."""
    cleaned = sorted({k.strip() for k in keywords if k and k.strip()}, key=len, reverse=True)
    if not cleaned:
        return None
    alternatives = "|".join(re.escape(k) for k in cleaned)
    return re.compile(rf"^(?:{alternatives})(?![A-Za-z0-9])", re.IGNORECASE)


class OcrExtractor:
    """Converts a CaptureFrame into a filtered Transcript."""

    def __init__(
        self,
        engine: OcrEngine,
        chrome_keywords: Iterable[str] | None = None,
        min_line_length: int = 3,
        upscale_min_width: int = 1600,
    ) -> None:
        self._engine = engine
        keywords = DEFAULT_CHROME_KEYWORDS if chrome_keywords is None else chrome_keywords
        self._chrome_re = build_chrome_pattern(keywords)
        self._min_line_length = min_line_length
        self._upscale_min_width = upscale_min_width

    def extract(self, frame: CaptureFrame) -> Transcript:
        """Run OCR over a frame and return the filtered transcript.

        Raises:
            ExtractionError: If the image cannot be decoded, the engine
                fails, or it returns no text at all.
        """
        try:
            image = decode_image(frame.image_bytes)
        except ValueError as e:
            raise ExtractionError(str(e), engine=self._engine.name) from e

        prepared = numpy_to_pil(
            enhance_for_ocr(pil_to_numpy(image), min_width=self._upscale_min_width)
        )

        try:
            raw_lines = self._engine.recognize(prepared)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(
                f"OCR engine {self._engine.name} failed: {e}", engine=self._engine.name
            ) from e

        full_text = "\n".join(line.text for line in raw_lines).strip()
        if not full_text:
            raise ExtractionError(
                "OCR returned no text. Make sure the document is visible on screen.",
                engine=self._engine.name,
                code="EMPTY_TRANSCRIPT",
            )

        kept = self.filter_lines(raw_lines)
        filtered_text = "\n".join(line.text for line in kept).strip()

        logger.info(
            "Extracted %d characters (%d of %d lines kept)",
            len(filtered_text), len(kept), len(raw_lines),
        )
        logger.debug("Transcript preview: %s", filtered_text[:200])

        return Transcript(
            full_text=full_text,
            filtered_text=filtered_text,
            lines=kept,
            frame_timestamp=frame.timestamp,
        )

    def filter_lines(self, lines: Iterable[TranscriptLine]) -> list[TranscriptLine]:
        """Drop lines that look like editor chrome or OCR noise."""
        kept = []
        for line in lines:
            text = line.text.strip()
            if self.is_noise(text):
                continue
            kept.append(line if text == line.text else TranscriptLine(text=text, confidence=line.confidence))
        return kept

    def is_noise(self, text: str) -> bool:
        text = text.strip()
        if len(text) < self._min_line_length:
            return True
        if _SYMBOL_RUN_RE.match(text):
            return True
        if self._chrome_re is not None and self._chrome_re.match(text):
            return True
        return False
