"""Tests for the HTTP endpoint server."""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from docpaste.domain.models import EditCategory, PipelineResult, PipelineState
from docpaste.endpoint.server import create_app, result_message
from docpaste.intent.classifier import IntentClassifier


def _success(category: EditCategory = EditCategory.GRAMMAR) -> PipelineResult:
    return PipelineResult(
        success=True,
        final_state=PipelineState.SUCCEEDED,
        edit_type=category,
        original_length=42,
        improved_length=44,
        clipboard_written=True,
    )


class TestEndpointServer:
    """Test the FastAPI routes with a mocked orchestrator."""

    @pytest.fixture
    def orchestrator(self) -> MagicMock:
        mock = MagicMock()
        mock.classifier = IntentClassifier()
        mock.state = PipelineState.IDLE
        mock.is_busy = False
        mock.run = AsyncMock(return_value=_success())
        return mock

    @pytest.fixture
    def client(self, orchestrator: MagicMock) -> TestClient:
        return TestClient(create_app(orchestrator=orchestrator))

    @pytest.fixture
    def image_url(self, png_bytes: bytes) -> str:
        return "data:image/png;base64," + base64.b64encode(png_bytes).decode()

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["pipeline_state"] == "idle"
        assert body["busy"] is False

    def test_edit_success(self, client: TestClient, orchestrator: MagicMock, image_url: str) -> None:
        response = client.post(
            "/edit",
            json={
                "image": image_url,
                "instruction": "please fix the grammar in this paragraph",
                "context_tabs": [{"title": "Essay", "url": "https://docs.google.com/document/d/1/edit"}],
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["handled"] is True
        assert body["success"] is True
        assert body["editType"] == "Grammar"
        assert body["originalLength"] == 42
        assert body["improvedLength"] == 44
        assert body["message"].startswith("Analyzing your document")

        frame, instruction, tabs = orchestrator.run.call_args.args
        assert frame.is_png
        assert instruction == "please fix the grammar in this paragraph"
        assert tabs[0].url.startswith("https://docs.google.com")
        assert orchestrator.run.call_args.kwargs["category"] == EditCategory.GRAMMAR

    def test_non_edit_not_handled(self, client: TestClient, orchestrator: MagicMock, image_url: str) -> None:
        response = client.post("/edit", json={"image": image_url, "instruction": "what time is it"})
        assert response.status_code == 200
        assert response.json() == {"handled": False}
        orchestrator.run.assert_not_awaited()

    def test_edit_without_image_not_handled(self, client: TestClient, orchestrator: MagicMock) -> None:
        response = client.post("/edit", json={"instruction": "fix the grammar"})
        assert response.json()["handled"] is False
        orchestrator.run.assert_not_awaited()

    def test_bad_image_rejected(self, client: TestClient) -> None:
        response = client.post("/edit", json={"image": "data:image/png;base64,@@@", "instruction": "polish it"})
        assert response.status_code == 400

    def test_edit_with_unrelated_tabs_not_handled(
        self, client: TestClient, orchestrator: MagicMock, image_url: str
    ) -> None:
        response = client.post(
            "/edit",
            json={
                "image": image_url,
                "instruction": "fix the grammar",
                "context_tabs": [{"title": "PR #12", "url": "https://github.com/acme/app/pull/12"}],
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["handled"] is False
        assert "document" in body["reason"]
        orchestrator.run.assert_not_awaited()

    def test_edit_naming_the_document_handled_without_tabs(
        self, client: TestClient, orchestrator: MagicMock, image_url: str
    ) -> None:
        response = client.post(
            "/edit",
            json={"image": image_url, "instruction": "fix the grammar in this document"},
        )
        assert response.json()["handled"] is True
        orchestrator.run.assert_awaited_once()

    def test_fallback_reported(self, client: TestClient, orchestrator: MagicMock, image_url: str) -> None:
        orchestrator.run.return_value = PipelineResult(
            success=False,
            final_state=PipelineState.FAILED_WITH_FALLBACK,
            edit_type=EditCategory.POLISH,
            original_length=42,
            improved_length=50,
            error="Failed to replace text: no window",
            fallback_used=True,
            clipboard_written=True,
        )
        body = client.post("/edit", json={"image": image_url, "instruction": "polish this"}).json()
        assert body["success"] is False
        assert body["fallbackUsed"] is True
        assert "clipboard" in body["message"]


class TestResultMessage:
    @pytest.mark.parametrize(
        ("category", "fragment"),
        [
            (EditCategory.GRAMMAR, "Fixed all grammar and spelling errors"),
            (EditCategory.SYNTHESIS, "Synthesized your notes"),
            (EditCategory.POLISH, "Polished and improved"),
        ],
    )
    def test_success_messages(self, category: EditCategory, fragment: str) -> None:
        message = result_message(_success(category))
        assert fragment in message
        assert message.endswith("Changes have been applied directly to your Google Doc.")

    def test_fatal_message_is_error(self) -> None:
        result = PipelineResult(
            success=False, final_state=PipelineState.FAILED_FATAL, error="OCR returned no text."
        )
        assert result_message(result) == "OCR returned no text."
