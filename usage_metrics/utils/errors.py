"""Provider-scoped error taxonomy."""

from typing import Optional


class UsageMetricsError(Exception):
    """Base error for a failed provider collection step."""

    def __init__(self, message: str, provider: str = "unknown", step: str = "unknown"):
        super().__init__(message)
        self.provider = provider
        self.step = step

    def __str__(self) -> str:
        return f"[{self.step}] {self.args[0]}"


class ConfigurationMissing(UsageMetricsError):
    """A required credential or setting is absent."""

    def __init__(self, setting: str, provider: str = "unknown"):
        super().__init__(
            f"Required setting not configured: {setting}",
            provider=provider,
            step="configuration"
        )
        self.setting = setting


class UpstreamUnreachable(UsageMetricsError):
    """Connection or RPC failure to the cookie service or a provider."""


class UpstreamRejected(UsageMetricsError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str, provider: str = "unknown", url: Optional[str] = None):
        target = f" from {url}" if url else ""
        super().__init__(
            f"HTTP {status_code}{target}: {body}",
            provider=provider,
            step="response_status"
        )
        self.status_code = status_code
        self.body = body


class ResponseUnparsable(UsageMetricsError):
    """Response body does not match the provider's expected shape."""

    def __init__(self, reason: str, body: str, provider: str = "unknown"):
        super().__init__(
            f"Failed to parse response ({reason}); body: {body}",
            provider=provider,
            step="parse"
        )
        self.body = body
