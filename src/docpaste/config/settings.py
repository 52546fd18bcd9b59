"""Configuration management for docpaste.

Loads settings from a YAML configuration file with environment variable
overrides for sensitive values (API keys). Supports .env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/docpaste.yaml")

DEFAULT_CHROME_KEYWORDS = [
    "File",
    "Edit",
    "View",
    "Insert",
    "Format",
    "Tools",
    "Extensions",
    "Help",
    "Share",
    "Comments",
    "Suggesting",
    "Editing",
    "Viewing",
    "Page",
    "Zoom",
    "Normal text",
    "Last edit was",
]


class OcrConfig(BaseModel):
    language: str = Field(default="eng", description="Tesseract language code(s)")
    tesseract_cmd: str | None = Field(default=None, description="Path to the tesseract binary")
    page_segmentation_mode: int = Field(default=6, ge=0, le=13)
    chrome_keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_CHROME_KEYWORDS))
    min_line_length: int = Field(default=3, ge=1)
    upscale_min_width: int = Field(default=1600, gt=0)


class RewriteConfig(BaseModel):
    provider: Literal["openai", "anthropic"] = Field(default="openai")
    model: str = Field(default="gpt-4o")
    base_url: str | None = Field(default=None)
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4000, gt=0)
    refusal_window: int = Field(default=150, gt=0)


class InjectionConfig(BaseModel):
    platform: Literal["auto", "macos", "linux"] = Field(default="auto")
    browser_app: str = Field(default="Google Chrome")
    document_url_pattern: str = Field(default="docs.google.com/document")
    window_title_pattern: str = Field(default="Google Docs")
    settle_delay: float = Field(default=0.5, ge=0.0, description="Wait after clipboard write")
    focus_delay: float = Field(default=0.4, ge=0.0, description="Wait after focusing the window")
    select_delay: float = Field(default=0.4, ge=0.0, description="Wait after select-all")
    paste_delay: float = Field(default=0.6, ge=0.0, description="Wait after paste")
    verify_clipboard: bool = Field(default=True)
    verify_prefix_length: int = Field(default=100, gt=0)
    min_content_length: int = Field(default=5, ge=1)
    command_timeout: float = Field(default=10.0, gt=0)


class PipelineConfig(BaseModel):
    ocr_timeout: float = Field(default=30.0, gt=0)
    rewrite_timeout: float = Field(default=60.0, gt=0)
    automation_timeout: float = Field(default=15.0, gt=0)
    min_transcript_length: int = Field(default=10, ge=1)


class EndpointConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8765, ge=1, le=65535)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the docpaste pipeline.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "DOCPASTE_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # API Keys
    openai_api_key: SecretStr = Field(default=SecretStr(""))
    anthropic_api_key: SecretStr = Field(default=SecretStr(""))
    openrouter_api_key: SecretStr = Field(default=SecretStr(""))

    # Configuration sections
    ocr: OcrConfig = Field(default_factory=OcrConfig)
    rewrite: RewriteConfig = Field(default_factory=RewriteConfig)
    injection: InjectionConfig = Field(default_factory=InjectionConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                if not os.environ.get(key):
                    os.environ[key] = value


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply the unprefixed provider env vars most users already have set."""
    openai_key = os.environ.get("OPENAI_API_KEY", "")
    anthropic_key = os.environ.get("ANTHROPIC_API_KEY", "")
    or_key = os.environ.get("OPENROUTER_API_KEY", "")
    or_base_url = os.environ.get("OPENROUTER_BASE_URL", "")
    rewrite_model = os.environ.get("REWRITE_MODEL", "")

    if openai_key and not yaml_data.get("openai_api_key"):
        yaml_data["openai_api_key"] = openai_key
    if anthropic_key and not yaml_data.get("anthropic_api_key"):
        yaml_data["anthropic_api_key"] = anthropic_key
    if or_key:
        yaml_data["openrouter_api_key"] = or_key

    if "rewrite" not in yaml_data:
        yaml_data["rewrite"] = {}

    if or_base_url and not yaml_data["rewrite"].get("base_url"):
        yaml_data["rewrite"]["base_url"] = or_base_url

    if rewrite_model and not yaml_data["rewrite"].get("model"):
        yaml_data["rewrite"]["model"] = rewrite_model
