"""Tests for clipboard text sanitization."""

from __future__ import annotations

import pytest

from docpaste.text.sanitizer import count_control_chars, sanitize


class TestSanitize:
    """Test sanitize() normalization rules."""

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input(self, value: str | None) -> None:
        assert sanitize(value) == ""

    def test_plain_ascii_unchanged(self) -> None:
        text = "The quick brown fox jumps over the lazy dog."
        assert sanitize(text) == text

    def test_smart_quotes(self) -> None:
        assert sanitize("“It’s fine,” she said.") == "\"It's fine,\" she said."

    def test_low_and_prime_quotes(self) -> None:
        assert sanitize("\u201alow\u201b \u201edouble\u201f 5\u2032 6\u2033") == "'low' \"double\" 5' 6\""

    def test_dashes_and_ellipsis(self) -> None:
        assert sanitize("pages 1–3 — wait…") == "pages 1-3 - wait..."

    def test_special_spaces(self) -> None:
        assert sanitize("a\u00a0b\u2003c\u2009d") == "a b c d"

    def test_zero_width_removed(self) -> None:
        assert sanitize("\ufeffzero\u200bwidth\u200c\u200d\u2060") == "zerowidth"

    def test_line_and_paragraph_separators(self) -> None:
        assert sanitize("one\u2028two\u2029three") == "one\ntwo\n\nthree"

    def test_replacement_character_dropped(self) -> None:
        assert sanitize("caf\ufffd") == "caf"

    def test_nfc_normalization(self) -> None:
        assert sanitize("cafe\u0301") == "caf\u00e9"

    def test_mojibake_marker_removed(self) -> None:
        assert sanitize("work Äîunless noted") == "work unless noted"

    def test_mojibake_sequences(self) -> None:
        assert sanitize("it‚Äôs ‚Äúfine‚Äù") == "it's \"fine\""

    def test_lone_circumflex_in_long_word_removed(self) -> None:
        assert sanitize("the docuîment") == "the document"

    @pytest.mark.parametrize(
        "word",
        ["naïve", "île", "dîner", "maître", "connaître"],
    )
    def test_accented_words_preserved(self, word: str) -> None:
        assert sanitize(word) == word

    def test_control_characters_removed(self) -> None:
        assert sanitize("bell\x07 and\x00 null") == "bell and null"

    def test_crlf_normalized(self) -> None:
        assert sanitize("a\r\nb\rc") == "a\nb\nc"

    def test_whitespace_collapsed(self) -> None:
        assert sanitize("  a \t  b  \n   c\n\n\n\nd  ") == "a b\nc\n\nd"

    @pytest.mark.parametrize(
        "text",
        [
            "\u201cquoted\u201d\u00a0\u00a0 text",
            "a ÄîÄîword",
            "tabs\t\t\x0bvertical\x0c feed",
            "x\u00a0 \u00a0 \n\u00a0 \n\n\ny",
            "‚Äî‚Äî",
        ],
    )
    def test_idempotent(self, text: str) -> None:
        once = sanitize(text)
        assert sanitize(once) == once

    @pytest.mark.parametrize(
        "text",
        ["plain", "ctrl\x01\x02chars", "\x1b[31mred\x1b[0m", "mixed\x7f\x85\u00a0"],
    )
    def test_never_adds_control_characters(self, text: str) -> None:
        assert count_control_chars(sanitize(text)) <= count_control_chars(text)

    def test_count_control_chars_ignores_newline_and_tab(self) -> None:
        assert count_control_chars("a\nb\tc\x01") == 1
