"""Tests for domain models."""

from __future__ import annotations

import base64
from datetime import datetime

import pytest

from docpaste.domain.models import (
    CaptureFrame,
    ContextTab,
    EditCategory,
    EditRequest,
    PipelineResult,
    PipelineState,
)


class TestCaptureFrame:
    """Test CaptureFrame construction from data URLs."""

    def test_from_data_url(self, png_bytes: bytes) -> None:
        url = "data:image/png;base64," + base64.b64encode(png_bytes).decode()
        frame = CaptureFrame.from_data_url(url, timestamp=datetime(2025, 1, 1))
        assert frame.image_bytes == png_bytes
        assert frame.is_png
        assert frame.timestamp == datetime(2025, 1, 1)

    def test_from_bare_base64(self, png_bytes: bytes) -> None:
        frame = CaptureFrame.from_data_url(base64.b64encode(png_bytes).decode())
        assert frame.image_bytes == png_bytes

    @pytest.mark.parametrize("value", ["", "   ", "data:image/png;base64,"])
    def test_empty_rejected(self, value: str) -> None:
        with pytest.raises(ValueError):
            CaptureFrame.from_data_url(value)

    def test_invalid_base64_rejected(self) -> None:
        with pytest.raises(ValueError, match="base64"):
            CaptureFrame.from_data_url("data:image/png;base64,not*base64!")

    def test_non_image_media_type_rejected(self) -> None:
        with pytest.raises(ValueError, match="media type"):
            CaptureFrame.from_data_url("data:text/plain;base64,aGVsbG8=")

    def test_frame_is_frozen(self, sample_frame: CaptureFrame) -> None:
        with pytest.raises(Exception):
            sample_frame.source_id = "other"  # type: ignore[misc]


class TestEditRequest:
    def test_targets_document(self) -> None:
        request = EditRequest(
            instruction="fix grammar",
            category=EditCategory.GRAMMAR,
            context_tabs=[
                ContextTab(title="Inbox", url="https://mail.google.com/"),
                ContextTab(title="Essay", url="https://docs.google.com/document/d/abc/edit"),
            ],
        )
        assert request.targets_document()

    def test_no_document_tab(self) -> None:
        request = EditRequest(instruction="fix grammar", category=EditCategory.GRAMMAR)
        assert not request.targets_document()


class TestPipelineResult:
    def test_success_payload(self) -> None:
        result = PipelineResult(
            success=True,
            final_state=PipelineState.SUCCEEDED,
            edit_type=EditCategory.GRAMMAR,
            original_length=42,
            improved_length=44,
        )
        assert result.to_payload() == {
            "success": True,
            "editType": "Grammar",
            "originalLength": 42,
            "improvedLength": 44,
        }

    def test_fallback_payload(self) -> None:
        result = PipelineResult(
            success=False,
            final_state=PipelineState.FAILED_WITH_FALLBACK,
            edit_type=EditCategory.POLISH,
            error="automation stage timed out after 15.0s",
            fallback_used=True,
            clipboard_written=True,
        )
        payload = result.to_payload()
        assert payload["fallbackUsed"] is True
        assert payload["error"].startswith("automation stage")

    def test_terminal_states(self) -> None:
        assert PipelineState.SUCCEEDED.is_terminal
        assert PipelineState.FAILED_FATAL.is_terminal
        assert not PipelineState.REWRITING.is_terminal
