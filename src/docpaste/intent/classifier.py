"""Edit-intent detection for free-form user instructions.

The overlay receives every kind of question. Only instructions that ask
to change the visible document should trigger the rewrite pipeline, and
those are bucketed into one of three edit categories that select the
rewriting prompt.

Matching is deliberately permissive: a false positive costs one rewrite
the user can undo, a false negative means the assistant answers in chat
instead of editing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from docpaste.domain.models import ContextTab, EditCategory, EditRequest

logger = logging.getLogger(__name__)

# Bare substrings: "fixup", "improvements", "refinements" and "rewrites" all count
_EDIT_KEYWORDS = ("polish", "edit", "improv", "fix", "refine", "rewrit")

_EDIT_PATTERNS = [
    re.compile(
        r"\b(edit(s|ed|ing)?|fix(es|ed|ing)?|improve[sd]?|improving|polish(es|ed|ing)?"
        r"|refine[sd]?|refining|revise[sd]?|revising|rewrite|rewriting|rewrote"
        r"|enhance[sd]?|enhancing|clean\s*up|correct(s|ed|ing)?|proofread(ing)?)\b"
    ),
    re.compile(r"\b(grammar|grammatical|spelling|punctuation|typos?)\b.*\b(fix|check|error|mistake|issue)"),
    re.compile(r"\b(synthesi[sz]e|combine|merge|consolidate)\b"),
    re.compile(r"\bturn\b.*\binto\b.*\bparagraphs?\b"),
    re.compile(r"\bnotes?\b.*\binto\b.*\bparagraphs?\b"),
    re.compile(r"\bmake\b.*\b(better|clearer|cleaner|tighter|more\s+professional)\b"),
    re.compile(r"\b(clarify|simplify|expand|elaborate)\b"),
]

_GRAMMAR_RE = re.compile(r"\b(grammar|grammatical|spelling|punctuation|typos?)\b")
_SYNTHESIS_RE = re.compile(
    r"\b(synthesi[sz]e|combine|merge|consolidate)\b"
    r"|\bnotes?\b.*\bparagraphs?\b"
    r"|\bbullets?\b.*\bparagraphs?\b"
)

_DOCUMENT_PHRASES = ("google doc", "document")
_DOCUMENT_EDIT_VERBS = ("polish", "edit", "improv")


class IntentClassifier:
    """Decides whether an instruction is an edit request and of which kind."""

    def __init__(self, document_url_pattern: str = "docs.google.com") -> None:
        self._document_url_pattern = document_url_pattern

    def is_edit_request(self, instruction: str | None) -> bool:
        if not instruction or not instruction.strip():
            return False
        text = instruction.lower()
        if any(keyword in text for keyword in _EDIT_KEYWORDS):
            return True
        return any(pattern.search(text) for pattern in _EDIT_PATTERNS)

    def classify(self, instruction: str | None) -> EditCategory | None:
        """Return the edit category, or None when no edit is requested."""
        if not self.is_edit_request(instruction):
            logger.debug("No edit intent in %r", (instruction or "")[:50])
            return None

        text = instruction.lower()
        if _GRAMMAR_RE.search(text):
            category = EditCategory.GRAMMAR
        elif _SYNTHESIS_RE.search(text):
            category = EditCategory.SYNTHESIS
        else:
            category = EditCategory.POLISH

        logger.info("Classified instruction as %s edit", category.value)
        return category

    def build_request(
        self,
        instruction: str,
        context_tabs: Iterable[ContextTab] | None = None,
        extra_context: str | None = None,
    ) -> EditRequest | None:
        """Build an EditRequest, or None when the instruction is not an edit."""
        category = self.classify(instruction)
        if category is None:
            return None
        request = EditRequest(
            instruction=instruction.strip(),
            category=category,
            context_tabs=list(context_tabs or []),
            extra_context=extra_context,
        )
        if request.context_tabs and not request.targets_document(self._document_url_pattern):
            logger.warning("Edit requested but no attached tab matches %s", self._document_url_pattern)
        return request

    def should_edit(self, request: EditRequest) -> bool:
        """Whether an edit request is aimed at the document window.

        A bare "fix the grammar" with only unrelated tabs attached is left
        to the chat flow so nothing is pasted over the wrong window.
        """
        if request.targets_document(self._document_url_pattern):
            return True
        text = request.instruction.lower()
        if any(phrase in text for phrase in _DOCUMENT_PHRASES):
            return True
        return any(verb in text for verb in _DOCUMENT_EDIT_VERBS)
