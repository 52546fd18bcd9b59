"""Text normalization for pasting into a foreign text surface.

Every string that leaves the pipeline for the clipboard passes through
``sanitize``. It repairs the encoding artifacts model output and OCR
transcripts tend to carry, maps typographic punctuation to ASCII, and
normalizes whitespace so the target editor receives plain, stable text.
"""

from __future__ import annotations

import logging
import re
import unicodedata

logger = logging.getLogger(__name__)

# Applying the passes twice is always enough in practice; the cap only
# guards against pathological inputs.
_MAX_PASSES = 4

# UTF-8 punctuation decoded as Mac Roman. Matched before the single
# character table so the leading U+201A is not turned into a quote first.
_MOJIBAKE_SEQUENCES = {
    "‚Äî": "-",  # em dash
    "‚Äì": "-",  # en dash
    "‚Äô": "'",  # right single quote
    "‚Äò": "'",  # left single quote
    "‚Äú": '"',  # left double quote
    "‚Äù": '"',  # right double quote
    "‚Ä¶": "...",  # ellipsis
}

_CHAR_TABLE = {
    # Quotes and primes
    0x2018: "'",
    0x2019: "'",
    0x201A: "'",
    0x201B: "'",
    0x2032: "'",
    0x2034: "'",
    0x2035: "'",
    0x201C: '"',
    0x201D: '"',
    0x201E: '"',
    0x201F: '"',
    0x2033: '"',
    # Dashes
    0x2010: "-",
    0x2011: "-",
    0x2012: "-",
    0x2013: "-",
    0x2014: "-",
    0x2015: "-",
    0x2212: "-",
    # Ellipsis
    0x2026: "...",
    # Line and paragraph separators
    0x2028: "\n",
    0x2029: "\n\n",
    # Zero-width characters and byte-order marks
    0x200B: None,
    0x200C: None,
    0x200D: None,
    0x2060: None,
    0xFEFF: None,
    0xFFFD: None,
}
# Non-breaking and typographic spaces
_CHAR_TABLE.update({cp: " " for cp in (0x00A0, 0x202F, 0x205F, 0x3000, *range(0x2000, 0x200B))})

# Bare corruption markers glued to the next word ("Äîunless" -> "unless").
# Only stripped when a lowercase letter follows and no letter precedes.
_MARKER_RE = re.compile(r"(?<![A-Za-zÀ-ɏ])Ä[îöü](?=[a-z])")

# A lone "î" between two runs of lowercase ASCII letters long enough that
# no common accented word (île, dîner, maître, connaître) matches.
_LONE_CIRCUMFLEX_RE = re.compile(r"(?<=[a-z]{3})î(?=[a-z]{4})")

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_HSPACE_RE = re.compile(r"[ \t]+")
_NEWLINE_PAD_RE = re.compile(r" *\n *")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def sanitize(text: str | None) -> str:
    """Normalize text for safe injection into another application.

    Total and idempotent: ``sanitize(sanitize(x)) == sanitize(x)``. It
    never raises; anything unexpected falls back to the best result
    computed so far.
    """
    if not text:
        return ""

    result = str(text)
    for _ in range(_MAX_PASSES):
        try:
            cleaned = _sanitize_once(result)
        except Exception as e:  # noqa: BLE001 - best-effort contract
            logger.warning("Sanitization pass failed, keeping partial result: %s", e)
            break
        if cleaned == result:
            break
        result = cleaned
    return result


def _sanitize_once(text: str) -> str:
    text = text.replace("\ufffd", "")
    text = unicodedata.normalize("NFC", text)

    for sequence, replacement in _MOJIBAKE_SEQUENCES.items():
        text = text.replace(sequence, replacement)
    text = _MARKER_RE.sub("", text)
    text = _LONE_CIRCUMFLEX_RE.sub("", text)

    text = text.translate(_CHAR_TABLE)

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _CONTROL_RE.sub("", text)

    text = _HSPACE_RE.sub(" ", text)
    text = _NEWLINE_PAD_RE.sub("\n", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def count_control_chars(text: str) -> int:
    """Count control characters other than newline and tab."""
    return sum(
        1 for ch in text if unicodedata.category(ch) == "Cc" and ch not in "\n\t"
    )
