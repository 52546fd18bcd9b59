"""Prompt templates for each edit category."""

from __future__ import annotations

from docpaste.domain.models import EditCategory

GRAMMAR_SYSTEM_PROMPT = (
    "You are an expert grammar and writing editor. Your task is to fix all "
    "grammar, spelling, and punctuation errors in the provided text while "
    "preserving the original meaning, style, and tone. The text was read from "
    "a screenshot, so ignore stray interface labels that are not part of the "
    "document. Return ONLY the corrected text without any explanations or comments."
)

SYNTHESIS_SYSTEM_PROMPT = (
    "You are an expert writing assistant. Your task is to synthesize individual "
    "notes, bullet points, or fragmented text into well-written, coherent "
    "paragraphs. Maintain all important information while creating smooth, "
    "flowing prose. Return ONLY the synthesized text without any explanations."
)

POLISH_SYSTEM_PROMPT = (
    "You are an expert writing editor. Your task is to polish and improve the "
    "provided text by enhancing clarity, flow, word choice, and overall quality "
    "while preserving the original meaning and style. Make the writing more "
    "professional, clear, and engaging. Return ONLY the improved text without "
    "any explanations or comments."
)

_SYSTEM_PROMPTS = {
    EditCategory.GRAMMAR: GRAMMAR_SYSTEM_PROMPT,
    EditCategory.SYNTHESIS: SYNTHESIS_SYSTEM_PROMPT,
    EditCategory.POLISH: POLISH_SYSTEM_PROMPT,
}


def build_prompts(category: EditCategory, text: str, instruction: str = "") -> tuple[str, str]:
    """Return the (system, user) prompt pair for a rewrite.

    The user's own instruction is appended for synthesis and polish, where
    it can steer tone or length. Grammar fixes ignore it.
    """
    instruction = (instruction or "").strip()
    if category == EditCategory.GRAMMAR:
        user_prompt = f"Fix all grammar, spelling, and punctuation errors in this text:\n\n{text}"
    elif category == EditCategory.SYNTHESIS:
        user_prompt = f"Synthesize these notes into well-written paragraphs:\n\n{text}"
        if instruction:
            user_prompt += f"\n\n{instruction}"
    else:
        user_prompt = f"Polish and improve this text:\n\n{text}"
        if instruction:
            user_prompt += f"\n\nUser request: {instruction}"
    return _SYSTEM_PROMPTS[category], user_prompt
