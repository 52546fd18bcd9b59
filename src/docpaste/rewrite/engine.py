"""Rewrite engine: transcript in, cleaned replacement text out.

Wraps a TextModelProvider with the category prompts and the cleanup the
model's raw reply needs before it may be pasted over a user's document.
"""

from __future__ import annotations

import logging
import re

from docpaste.domain.models import EditCategory, RewriteResult, Transcript
from docpaste.rewrite.base import RewriteError, RewriteFailure, TextModelProvider
from docpaste.rewrite.prompts import build_prompts

logger = logging.getLogger(__name__)

_OPENING_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSING_FENCE_RE = re.compile(r"\n?```\s*$")
_HEADING_RE = re.compile(r"^#{1,6}[ \t]+", re.MULTILINE)
_PREAMBLE_RE = re.compile(
    r"^(?:sure[,!.]?\s*|certainly[,!.]?\s*|of course[,!.]?\s*)?"
    r"(?:here(?:'s| is| are)|below is|the following is)\b[^\n]{0,80}:[ \t]*(?:\n+|$)",
    re.IGNORECASE,
)
_FIRST_SENTENCE_RE = re.compile(r"^(.+?[.!?])(\s+)", re.DOTALL)

_DECLINE = r"(?:assist|help|do\s+that|comply)"

REFUSAL_PATTERNS = [
    re.compile(r"^(?:i['’]m|i am)\s+sorry[,.]?\s+(?:but\s+)?i\s+can(?:not|n['’]?t)\s+" + _DECLINE, re.IGNORECASE),
    re.compile(r"^sorry[,.]?\s+(?:but\s+)?i\s+can(?:not|n['’]?t)\s+" + _DECLINE, re.IGNORECASE),
    re.compile(r"^i\s+apologi[sz]e[,.]?\s+but\s+i\s+can(?:not|n['’]?t)", re.IGNORECASE),
    re.compile(r"^unfortunately[,.]?\s+i\s+can(?:not|n['’]?t)\s+" + _DECLINE, re.IGNORECASE),
    re.compile(r"^as\s+an\s+ai\s+language\s+model\b", re.IGNORECASE),
]


class RewriteEngine:
    """Produces a replacement document text for one edit request."""

    def __init__(
        self,
        provider: TextModelProvider,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        refusal_window: int = 150,
    ) -> None:
        self._provider = provider
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._refusal_window = refusal_window

    @property
    def provider(self) -> TextModelProvider:
        return self._provider

    async def rewrite(
        self,
        transcript: Transcript,
        category: EditCategory,
        instruction: str = "",
    ) -> RewriteResult:
        """Rewrite a transcript according to its edit category.

        Raises:
            RewriteError: MODEL_FAILURE if the provider fails, REFUSED if
                the reply opens with a refusal, EMPTY if nothing is left
                after cleanup.
        """
        source = transcript.filtered_text
        system_prompt, user_prompt = build_prompts(category, source, instruction)
        logger.info("Rewriting %d characters as %s edit", len(source), category.value)

        try:
            raw = await self._provider.complete(
                system_prompt,
                user_prompt,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except RewriteError:
            raise
        except Exception as e:
            raise RewriteError(
                f"Text model call failed: {e}",
                reason=RewriteFailure.MODEL_FAILURE,
                provider=self._provider.name,
            ) from e

        raw = raw or ""
        cleaned = clean_model_output(raw)

        if is_refusal(cleaned, self._refusal_window):
            logger.warning("Model refused the rewrite: %s", cleaned[:80])
            raise RewriteError(
                "The model returned a refusal instead of improved text. Please try again.",
                reason=RewriteFailure.REFUSED,
                provider=self._provider.name,
                raw_response=raw,
            )
        if not cleaned:
            raise RewriteError(
                "The model returned no usable text.",
                reason=RewriteFailure.EMPTY,
                provider=self._provider.name,
                raw_response=raw,
            )

        logger.info("Text rewritten: %d -> %d characters", len(source), len(cleaned))
        logger.debug("Rewrite preview: %s", cleaned[:200])

        return RewriteResult(
            raw_text=raw,
            cleaned_text=cleaned,
            source_length=len(source),
            result_length=len(cleaned),
            category=category,
            model=self._provider.model,
        )


def clean_model_output(raw: str) -> str:
    """Strip conversational and Markdown wrapping from a model reply."""
    text = raw.strip()
    text = _OPENING_FENCE_RE.sub("", text, count=1)
    text = _CLOSING_FENCE_RE.sub("", text, count=1).strip()
    text = _PREAMBLE_RE.sub("", text, count=1).strip()
    # A preamble can sit outside the fence
    text = _OPENING_FENCE_RE.sub("", text, count=1)
    text = _CLOSING_FENCE_RE.sub("", text, count=1).strip()
    text = _HEADING_RE.sub("", text)
    return _drop_repeated_opening(text).strip()


def _drop_repeated_opening(text: str) -> str:
    match = _FIRST_SENTENCE_RE.match(text)
    if not match:
        return text
    sentence = match.group(1)
    rest = text[match.end():]
    if rest.startswith(sentence):
        return rest
    return text


def is_refusal(text: str, window: int = 150) -> bool:
    head = text[:window].strip()
    return any(pattern.match(head) for pattern in REFUSAL_PATTERNS)
