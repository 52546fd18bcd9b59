"""Text sanitization for clipboard injection.

Public API:
    sanitize -- Normalize text before it is pasted into another application
"""

from docpaste.text.sanitizer import count_control_chars, sanitize

__all__ = ["count_control_chars", "sanitize"]
