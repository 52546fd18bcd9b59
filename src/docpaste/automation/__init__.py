"""Desktop automation module for docpaste.

Provides clipboard staging and the platform adapters that focus the
document and paste over its content.

Public API:
    DocumentAutomator -- Abstract base class
    ClipboardStager -- Clipboard write / read-back
    AppleScriptAutomator -- macOS implementation
    XdotoolAutomator -- Linux X11 implementation
    create_automator -- Pick the adapter for the running platform
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docpaste.automation.base import AutomationError, DocumentAutomator, detect_platform
from docpaste.automation.clipboard import ClipboardStager

if TYPE_CHECKING:
    from docpaste.config.settings import InjectionConfig

__all__ = [
    "AutomationError",
    "ClipboardStager",
    "DocumentAutomator",
    "AppleScriptAutomator",
    "XdotoolAutomator",
    "create_automator",
]


def create_automator(config: InjectionConfig) -> DocumentAutomator:
    """Build the automation adapter for the configured (or detected) platform."""
    platform = detect_platform(config.platform)
    if platform == "macos":
        from docpaste.automation.macos import AppleScriptAutomator
        return AppleScriptAutomator(
            browser_app=config.browser_app,
            document_url_pattern=config.document_url_pattern,
            focus_delay=config.focus_delay,
            command_timeout=config.command_timeout,
        )
    from docpaste.automation.linux import XdotoolAutomator
    return XdotoolAutomator(
        window_title_pattern=config.window_title_pattern,
        focus_delay=config.focus_delay,
        command_timeout=config.command_timeout,
    )


def __getattr__(name: str) -> type:
    """Lazy import for the platform adapters."""
    if name == "AppleScriptAutomator":
        from docpaste.automation.macos import AppleScriptAutomator
        return AppleScriptAutomator
    if name == "XdotoolAutomator":
        from docpaste.automation.linux import XdotoolAutomator
        return XdotoolAutomator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
