"""
Configuration settings for the tab summarizer application.
"""

import os
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv

from tabsummarizer.models.schemas import BackendKind, SummarySettings
from tabsummarizer.utils.logger import logging


# Ensure environment variables are loaded
load_dotenv()

# Named creativity levels mapped to sampling temperature
CREATIVITY_LEVELS = {
    "none": 0.0,
    "low": 0.3,
    "medium": 0.5,
    "high": 0.8,
    "maximum": 1.0,
}


def parse_creativity(value: Optional[str], default: float = 0.5) -> float:
    """
    Turn a creativity preference into a temperature.

    Accepts a named level (none, low, medium, high, maximum) or a number.
    """
    if value is None or not str(value).strip():
        return default
    value = str(value).strip().lower()
    if value in CREATIVITY_LEVELS:
        return CREATIVITY_LEVELS[value]
    try:
        return float(value)
    except ValueError:
        logging.warning(f"Unknown creativity level '{value}', using {default}")
        return default


def parse_languages(value: Optional[str]) -> List[str]:
    """Split a comma separated list of language codes."""
    if not value:
        return []
    return [code.strip() for code in value.split(",") if code.strip()]


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "YouTube Tab Summarizer"
    APP_VERSION = "0.2.0"

    DEBUG = False
    LOG_LEVEL = "INFO"

    # Backend selection
    AI_BACKEND = os.getenv("AI_BACKEND", BackendKind.ASSISTANT.value)
    AI_CREATIVITY = os.getenv("AI_CREATIVITY", "medium")
    AI_MODEL = os.getenv("AI_MODEL")

    # API keys
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")
    OPENAI_API_TOKEN = os.getenv("OPENAI_API_TOKEN")
    ANTHROPIC_API_TOKEN = os.getenv("ANTHROPIC_API_TOKEN")

    # Default models
    ASSISTANT_MODEL = os.getenv("ASSISTANT_MODEL", "llama-3.3-70b-versatile")
    DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
    DEFAULT_ANTHROPIC_MODEL = "claude-3-5-haiku-latest"

    # Transcript languages
    SUMMARY_LANGUAGE = os.getenv("SUMMARY_LANGUAGE", "en")
    TRANSCRIPT_FALLBACK_LANGUAGES = parse_languages(os.getenv("TRANSCRIPT_FALLBACK_LANGUAGES", "en"))
    MAX_TRANSCRIPT_CHARS = int(os.getenv("MAX_TRANSCRIPT_CHARS", "100000"))

    # Browser tab inspection
    DEVTOOLS_URL = os.getenv("DEVTOOLS_URL", "http://127.0.0.1:9222")
    DEVTOOLS_TIMEOUT = float(os.getenv("DEVTOOLS_TIMEOUT", "2.0"))

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        logging.setLevel(os.getenv("LOG_LEVEL", cls.LOG_LEVEL).upper())

        # Validate required environment variables
        backend = cls.AI_BACKEND.lower()
        if backend == BackendKind.ASSISTANT.value and not cls.GROQ_API_KEY:
            logging.warning("GROQ_API_KEY environment variable not set. "
                            "Please set it in the .env file or environment variables.")
        elif backend == BackendKind.OPENAI.value and not cls.OPENAI_API_TOKEN:
            logging.warning("OPENAI_API_TOKEN is not set; the OpenAI backend will fail.")
        elif backend == BackendKind.ANTHROPIC.value and not cls.ANTHROPIC_API_TOKEN:
            logging.warning("ANTHROPIC_API_TOKEN is not set; the Anthropic backend will fail.")

    @classmethod
    def get_summary_settings(cls, **overrides: Any) -> SummarySettings:
        """
        Build the immutable settings snapshot used by one pipeline run.

        Args:
            overrides: Values that replace the environment ones (None is ignored)

        Returns:
            SummarySettings object
        """
        values: Dict[str, Any] = {
            "backend": BackendKind(cls.AI_BACKEND.lower()),
            "creativity": parse_creativity(cls.AI_CREATIVITY),
            "model": cls.AI_MODEL,
            "openai_api_token": cls.OPENAI_API_TOKEN,
            "anthropic_api_token": cls.ANTHROPIC_API_TOKEN,
            "language": cls.SUMMARY_LANGUAGE,
            "fallback_languages": cls.TRANSCRIPT_FALLBACK_LANGUAGES,
            "max_transcript_chars": cls.MAX_TRANSCRIPT_CHARS,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return SummarySettings(**values)

    @classmethod
    def default_model(cls, backend: BackendKind) -> str:
        """Model used when the user did not pick one."""
        return {
            BackendKind.ASSISTANT: cls.ASSISTANT_MODEL,
            BackendKind.OPENAI: cls.DEFAULT_OPENAI_MODEL,
            BackendKind.ANTHROPIC: cls.DEFAULT_ANTHROPIC_MODEL,
        }[backend]


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
