"""Shared test fixtures for the docpaste test suite.

Provides common fixtures used across unit tests: encoded screenshots,
a canned OCR engine, mock text providers, and fake clipboard and
automation backends.
"""

from __future__ import annotations

import io
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from docpaste.domain.models import CaptureFrame, Transcript, TranscriptLine
from docpaste.injection.injector import DocumentInjector
from docpaste.ocr.base import OcrEngine
from docpaste.rewrite.base import TextModelProvider

SAMPLE_TEXT = "The quick brown fox jump over the lazy dog"
CORRECTED_TEXT = "The quick brown fox jumps over the lazy dog."


class CannedOcrEngine(OcrEngine):
    """OcrEngine that returns preset lines instead of reading the image."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = lines
        self.calls = 0

    @property
    def name(self) -> str:
        return "canned"

    def recognize(self, image: Image.Image) -> list[TranscriptLine]:
        self.calls += 1
        return [TranscriptLine(text=line, confidence=90.0) for line in self.lines]


class FakeClipboard:
    """In-memory stand-in for ClipboardStager."""

    def __init__(self, fail: Exception | None = None) -> None:
        self.content: str | None = None
        self.fail = fail
        self.stage_calls = 0

    @property
    def tool(self) -> str:
        return "fake"

    async def stage(self, text: str) -> None:
        self.stage_calls += 1
        if self.fail is not None:
            raise self.fail
        self.content = text

    async def read(self) -> str:
        return self.content or ""

    async def verify(self, expected: str, prefix_length: int = 100, settle_delay: float = 0.0) -> bool:
        return (self.content or "")[:prefix_length] == expected[:prefix_length]


# ---------------------------------------------------------------------------
# Frame / Image Fixtures
# ---------------------------------------------------------------------------


def encode_png(width: int = 200, height: int = 100, color: tuple[int, int, int] = (255, 255, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """A small white PNG screenshot."""
    return encode_png()


@pytest.fixture
def sample_frame(png_bytes: bytes) -> CaptureFrame:
    """A CaptureFrame holding the sample PNG."""
    return CaptureFrame(
        image_bytes=png_bytes,
        timestamp=datetime(2025, 1, 1, 12, 0, 0),
        source_id="test",
    )


@pytest.fixture
def sample_transcript() -> Transcript:
    return Transcript(
        full_text=f"File Edit View Insert\n{SAMPLE_TEXT}",
        filtered_text=SAMPLE_TEXT,
        lines=[TranscriptLine(text=SAMPLE_TEXT, confidence=91.0)],
        frame_timestamp=datetime(2025, 1, 1, 12, 0, 0),
    )


@pytest.fixture
def canned_engine() -> CannedOcrEngine:
    return CannedOcrEngine(["File Edit View Insert Format Tools", SAMPLE_TEXT])


# ---------------------------------------------------------------------------
# Mock Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_provider() -> MagicMock:
    """A mock TextModelProvider returning the corrected sample sentence."""
    mock = MagicMock(spec=TextModelProvider)
    mock.model = "mock-model"
    mock.name = "mock"
    mock.complete = AsyncMock(return_value=CORRECTED_TEXT)
    return mock


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def mock_automator() -> AsyncMock:
    """A mock DocumentAutomator whose steps all succeed."""
    mock = AsyncMock()
    mock.platform = "test"
    return mock


@pytest.fixture
def injector(fake_clipboard: FakeClipboard, mock_automator: AsyncMock) -> DocumentInjector:
    """A DocumentInjector over fake backends with all delays disabled."""
    return DocumentInjector(
        stager=fake_clipboard,  # type: ignore[arg-type]
        automator=mock_automator,
        settle_delay=0.0,
        select_delay=0.0,
        paste_delay=0.0,
    )


@pytest.fixture
def engine_factory() -> type[CannedOcrEngine]:
    """The canned engine class, for tests that need their own lines."""
    return CannedOcrEngine


@pytest.fixture
def clipboard_factory() -> type[FakeClipboard]:
    return FakeClipboard
