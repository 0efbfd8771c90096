"""Configuration loader from environment variables or YAML with substitution."""

import yaml
import os
import re
from pathlib import Path
from typing import Any
from .models import UsageMetricsConfig
from .settings import Settings


class ConfigLoader:
    """Load and validate job configuration."""

    @staticmethod
    def load_from_env() -> UsageMetricsConfig:
        """
        Build configuration from environment variables.

        Missing credentials are left as None; the affected provider fails
        on its own at collection time.

        Returns:
            UsageMetricsConfig: Validated configuration object

        Raises:
            pydantic.ValidationError: If a provided value is invalid
            ValueError: If HTTP_TIMEOUT_SECONDS is not a number
        """
        settings = Settings()
        timeout = settings.HTTP_TIMEOUT_SECONDS

        raw_config = {
            "providers": {
                "assistant_usage": {
                    "org_id": settings.CLAUDE_ORG_ID,
                    "timeout_seconds": timeout,
                },
                "credit_balance": {
                    "api_key": settings.OPENROUTER_API_KEY,
                    "timeout_seconds": timeout,
                },
                "code_quota": {
                    "api_key": settings.GITHUB_TOKEN,
                    "timeout_seconds": timeout,
                },
            },
            "cookie_service": {"address": settings.COOKIE_SERVICE_ADDR},
            "telemetry": {
                "service_name": settings.OTEL_SERVICE_NAME,
                "otlp_endpoint": settings.OTEL_EXPORTER_OTLP_ENDPOINT,
            },
            "log_level": settings.LOG_LEVEL,
        }
        return UsageMetricsConfig(**raw_config)

    @staticmethod
    def load_from_file(config_path: str) -> UsageMetricsConfig:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            UsageMetricsConfig: Validated configuration object

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            pydantic.ValidationError: If configuration validation fails
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        raw_config = ConfigLoader._substitute_env_vars(raw_config)

        return UsageMetricsConfig(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """
        Recursively substitute ${ENV_VAR} placeholders with environment values.

        A string that consists of a single placeholder whose variable is unset
        becomes None, so optional credentials stay unset instead of empty.

        Args:
            obj: Object to process (str, dict, list, or primitive)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, str):
            pattern = r'\$\{(\w+)\}'
            whole = re.fullmatch(pattern, obj)
            if whole:
                return os.getenv(whole.group(1)) or None
            return re.sub(pattern, lambda m: os.getenv(m.group(1), ''), obj)

        elif isinstance(obj, dict):
            return {k: ConfigLoader._substitute_env_vars(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [ConfigLoader._substitute_env_vars(item) for item in obj]

        return obj
