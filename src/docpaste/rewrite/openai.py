"""OpenAI-compatible text model provider.

Works with OpenAI, OpenRouter, and any OpenAI-compatible API
by setting a custom base_url.
"""

from __future__ import annotations

import logging

from docpaste.rewrite.base import RewriteError, RewriteFailure, TextModelProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(TextModelProvider):
    """Text provider using OpenAI's chat completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
    ) -> None:
        super().__init__(model=model)
        self._api_key = api_key
        self._base_url = base_url
        self._client = None

    @property
    def name(self) -> str:
        return "openai"

    async def _ensure_client(self) -> None:
        """Lazily initialize the OpenAI async client."""
        if self._client is not None:
            return
        from openai import AsyncOpenAI
        kwargs = {"api_key": self._api_key}
        if self._base_url:
            kwargs["base_url"] = self._base_url
        self._client = AsyncOpenAI(**kwargs)
        logger.info("Initialized OpenAI client (model=%s, base_url=%s)", self._model, self._base_url)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> str:
        await self._ensure_client()
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except Exception as e:
            raise RewriteError(
                f"OpenAI API call failed: {e}",
                reason=RewriteFailure.MODEL_FAILURE,
                provider=self.name,
            ) from e

        if not response.choices:
            raise RewriteError(
                "OpenAI API returned no choices",
                reason=RewriteFailure.MODEL_FAILURE,
                provider=self.name,
            )
        raw_text = response.choices[0].message.content or ""
        logger.debug("Model raw response: %s", raw_text[:200])
        return raw_text

    async def health_check(self) -> bool:
        """Check if the API is reachable."""
        try:
            await self._ensure_client()
            await self._client.models.list()
            return True
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return False
