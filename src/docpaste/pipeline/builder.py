"""Assemble a PipelineOrchestrator from Settings."""

from __future__ import annotations

import logging

from docpaste.automation import ClipboardStager, create_automator
from docpaste.config.settings import Settings
from docpaste.injection.injector import DocumentInjector
from docpaste.intent.classifier import IntentClassifier
from docpaste.ocr.extractor import OcrExtractor
from docpaste.pipeline.orchestrator import PipelineOrchestrator, StateCallback
from docpaste.rewrite.base import TextModelProvider
from docpaste.rewrite.engine import RewriteEngine

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


def build_provider(settings: Settings) -> TextModelProvider:
    """Create the text model provider named in ``settings.rewrite``."""
    cfg = settings.rewrite
    if cfg.provider == "anthropic":
        from docpaste.rewrite.anthropic import AnthropicProvider
        return AnthropicProvider(
            api_key=settings.anthropic_api_key.get_secret_value(),
            model=cfg.model,
        )

    from docpaste.rewrite.openai import OpenAIProvider
    api_key = settings.openai_api_key.get_secret_value()
    base_url = cfg.base_url
    # If OpenRouter key is set, use it
    or_key = settings.openrouter_api_key.get_secret_value()
    if or_key:
        api_key = or_key
        if not base_url:
            base_url = OPENROUTER_BASE_URL
    return OpenAIProvider(api_key=api_key, model=cfg.model, base_url=base_url)


def build_extractor(settings: Settings) -> OcrExtractor:
    from docpaste.ocr.tesseract import TesseractEngine

    cfg = settings.ocr
    engine = TesseractEngine(
        language=cfg.language,
        page_segmentation_mode=cfg.page_segmentation_mode,
        tesseract_cmd=cfg.tesseract_cmd,
    )
    return OcrExtractor(
        engine,
        chrome_keywords=cfg.chrome_keywords,
        min_line_length=cfg.min_line_length,
        upscale_min_width=cfg.upscale_min_width,
    )


def build_injector(settings: Settings) -> DocumentInjector:
    cfg = settings.injection
    return DocumentInjector(
        stager=ClipboardStager.for_platform(cfg.platform, timeout=cfg.command_timeout),
        automator=create_automator(cfg),
        settle_delay=cfg.settle_delay,
        select_delay=cfg.select_delay,
        paste_delay=cfg.paste_delay,
        verify_clipboard=cfg.verify_clipboard,
        verify_prefix_length=cfg.verify_prefix_length,
        min_content_length=cfg.min_content_length,
    )


def build_orchestrator(
    settings: Settings,
    on_state_change: StateCallback | None = None,
) -> PipelineOrchestrator:
    """Wire every pipeline component from configuration."""
    rewrite_cfg = settings.rewrite
    rewriter = RewriteEngine(
        build_provider(settings),
        temperature=rewrite_cfg.temperature,
        max_tokens=rewrite_cfg.max_tokens,
        refusal_window=rewrite_cfg.refusal_window,
    )
    pipeline_cfg = settings.pipeline
    orchestrator = PipelineOrchestrator(
        extractor=build_extractor(settings),
        classifier=IntentClassifier(),
        rewriter=rewriter,
        injector=build_injector(settings),
        ocr_timeout=pipeline_cfg.ocr_timeout,
        rewrite_timeout=pipeline_cfg.rewrite_timeout,
        automation_timeout=pipeline_cfg.automation_timeout,
        min_transcript_length=pipeline_cfg.min_transcript_length,
        on_state_change=on_state_change,
    )
    logger.info(
        "Pipeline ready (provider=%s, model=%s)", rewrite_cfg.provider, rewrite_cfg.model
    )
    return orchestrator
