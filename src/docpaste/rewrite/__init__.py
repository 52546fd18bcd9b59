"""Rewrite module for docpaste.

Sends document transcripts to a text model with category-specific
prompts and cleans the reply into pasteable text.

Public API:
    TextModelProvider -- Abstract base class
    RewriteEngine -- Prompting and output cleanup
    AnthropicProvider -- Claude API implementation
    OpenAIProvider -- OpenAI / OpenRouter implementation
"""

from docpaste.rewrite.base import RewriteError, RewriteFailure, TextModelProvider
from docpaste.rewrite.engine import RewriteEngine

__all__ = [
    "RewriteEngine",
    "RewriteError",
    "RewriteFailure",
    "TextModelProvider",
    "AnthropicProvider",
    "OpenAIProvider",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "AnthropicProvider":
        from docpaste.rewrite.anthropic import AnthropicProvider
        return AnthropicProvider
    if name == "OpenAIProvider":
        from docpaste.rewrite.openai import OpenAIProvider
        return OpenAIProvider
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
