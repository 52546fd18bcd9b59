"""docpaste -- Document rewrite and auto-paste pipeline.

This package turns a screenshot of a visible document into corrected or
rewritten text and injects that text back into the live editor. The
architecture is intentionally indirect -- OCR in, clipboard and keystrokes
out -- so it works against editors the system does not control.
"""

__version__ = "0.1.0"
