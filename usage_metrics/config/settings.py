"""Environment settings."""

import os
from typing import Optional


class Settings:
    """Application settings from environment variables."""

    @staticmethod
    def get(key: str, default: Optional[str] = None, required: bool = False) -> str:
        """
        Get environment variable value.

        Args:
            key: Environment variable name
            default: Default value if not set
            required: Whether the variable is required

        Returns:
            str: Environment variable value

        Raises:
            ValueError: If required variable is not set
        """
        value = os.getenv(key, default)
        if required and not value:
            raise ValueError(f"Required environment variable not set: {key}")
        return value or ""

    @staticmethod
    def optional(key: str) -> Optional[str]:
        """Return the variable's value, or None when unset or empty."""
        return os.getenv(key) or None

    # Convenience accessors
    COOKIE_SERVICE_ADDR = property(lambda self: Settings.optional("COOKIE_SERVICE_ADDR"))
    CLAUDE_ORG_ID = property(lambda self: Settings.optional("CLAUDE_ORG_ID"))
    OPENROUTER_API_KEY = property(lambda self: Settings.optional("OPENROUTER_API_KEY"))
    GITHUB_TOKEN = property(lambda self: Settings.optional("GITHUB_TOKEN"))
    OTEL_SERVICE_NAME = property(lambda self: Settings.get("OTEL_SERVICE_NAME", "usage-metrics"))
    OTEL_EXPORTER_OTLP_ENDPOINT = property(lambda self: Settings.optional("OTEL_EXPORTER_OTLP_ENDPOINT"))
    HTTP_TIMEOUT_SECONDS = property(lambda self: float(Settings.get("HTTP_TIMEOUT_SECONDS", "30")))
    LOG_LEVEL = property(lambda self: Settings.get("LOG_LEVEL", "INFO"))
