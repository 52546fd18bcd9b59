"""Abstract base class for text model providers.

All provider implementations conform to this interface so the rewrite
engine can switch between OpenAI-compatible endpoints and Anthropic
without changing the rest of the pipeline.
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod

from docpaste.domain.errors import PipelineError

logger = logging.getLogger(__name__)


class TextModelProvider(ABC):
    """Abstract interface for chat-style text generation providers."""

    def __init__(self, model: str) -> None:
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> str:
        """Send one system + user exchange and return the raw reply text.

        Raises:
            RewriteError: With reason MODEL_FAILURE if the call fails.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is reachable and authenticated."""
        ...


class RewriteFailure(str, enum.Enum):
    MODEL_FAILURE = "MODEL_FAILURE"
    REFUSED = "REFUSED"
    EMPTY = "EMPTY"


class RewriteError(PipelineError):
    """Raised when the rewriting step cannot produce usable text."""

    def __init__(
        self,
        message: str,
        reason: RewriteFailure = RewriteFailure.MODEL_FAILURE,
        provider: str = "",
        raw_response: str = "",
    ) -> None:
        super().__init__(message, code=reason.value)
        self.reason = reason
        self.provider = provider
        self.raw_response = raw_response
