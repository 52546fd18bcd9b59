"""Anthropic Claude text model provider.

Uses the Anthropic Python SDK's Messages API. The system prompt is sent
through the dedicated ``system`` parameter rather than as a message.
"""

from __future__ import annotations

import logging

from docpaste.rewrite.base import RewriteError, RewriteFailure, TextModelProvider

logger = logging.getLogger(__name__)


class AnthropicProvider(TextModelProvider):
    """Text provider using Anthropic's Claude API.

    Example usage::

        provider = AnthropicProvider(api_key="sk-ant-...")
        text = await provider.complete(system, user)
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
    ) -> None:
        super().__init__(model=model)
        self._api_key = api_key
        self._client = None

    @property
    def name(self) -> str:
        return "anthropic"

    async def _ensure_client(self) -> None:
        """Lazily initialize the Anthropic async client."""
        if self._client is not None:
            return
        from anthropic import AsyncAnthropic
        self._client = AsyncAnthropic(api_key=self._api_key)
        logger.info("Initialized Anthropic client (model=%s)", self._model)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> str:
        await self._ensure_client()
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except Exception as e:
            raise RewriteError(
                f"Anthropic API call failed: {e}",
                reason=RewriteFailure.MODEL_FAILURE,
                provider=self.name,
            ) from e

        raw_text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        logger.debug("Model raw response: %s", raw_text[:200])
        return raw_text

    async def health_check(self) -> bool:
        """Send a one-token request to verify the key and connectivity."""
        try:
            await self._ensure_client()
            await self._client.messages.create(
                model=self._model,
                max_tokens=1,
                messages=[{"role": "user", "content": "ping"}],
            )
            return True
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return False
