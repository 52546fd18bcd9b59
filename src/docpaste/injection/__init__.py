"""Document injection for docpaste."""

from docpaste.injection.injector import (
    FALLBACK_HINT,
    DocumentInjector,
    InjectionError,
    InjectionFailure,
)

__all__ = ["FALLBACK_HINT", "DocumentInjector", "InjectionError", "InjectionFailure"]
