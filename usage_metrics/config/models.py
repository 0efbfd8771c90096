"""Pydantic configuration models for the usage metrics job."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional

from ..utils.reset_time import ResetUnit


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


class ProviderConfig(BaseModel):
    """Settings shared by every provider."""
    enabled: bool = True
    url: str
    timeout_seconds: float = Field(default=30.0, gt=0)
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v


class AssistantUsageConfig(ProviderConfig):
    """AI assistant usage dashboard, authenticated by browser cookies."""
    url: str = "https://claude.ai/api/organizations/{org_id}/usage"
    org_id: Optional[str] = None
    cookie_host: str = "claude.ai"
    reset_unit: ResetUnit = ResetUnit.SECONDS

    @field_validator('url')
    @classmethod
    def validate_org_placeholder(cls, v: str) -> str:
        """URL must be parameterized by the organization id."""
        if '{org_id}' not in v:
            raise ValueError('URL must contain an {org_id} placeholder')
        return v


class CreditBalanceConfig(ProviderConfig):
    """Credit balance API, authenticated by API key."""
    url: str = "https://openrouter.ai/api/v1/credits"
    api_key: Optional[str] = None


class CodeQuotaConfig(ProviderConfig):
    """Code assistant quota API, authenticated by token."""
    url: str = "https://api.github.com/copilot_internal/user"
    api_key: Optional[str] = None
    reset_unit: ResetUnit = ResetUnit.MINUTES


class CookieServiceConfig(BaseModel):
    """gRPC cookie storage service."""
    address: Optional[str] = None  # host:port
    method: str = "/cookies.CookieService/GetCookies"
    timeout_seconds: float = Field(default=10.0, gt=0)


class TelemetryConfig(BaseModel):
    """OpenTelemetry metrics export configuration."""
    service_name: str = "usage-metrics"
    otlp_endpoint: Optional[str] = None  # Console exporter when unset
    export_timeout_millis: int = Field(default=10000, ge=100)


class ProvidersConfig(BaseModel):
    """All provider configurations."""
    assistant_usage: AssistantUsageConfig = Field(default_factory=AssistantUsageConfig)
    credit_balance: CreditBalanceConfig = Field(default_factory=CreditBalanceConfig)
    code_quota: CodeQuotaConfig = Field(default_factory=CodeQuotaConfig)


class UsageMetricsConfig(BaseModel):
    """Root configuration model for the job."""
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    cookie_service: CookieServiceConfig = Field(default_factory=CookieServiceConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    log_level: str = "INFO"

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f'Invalid log level: {v}')
        return v.upper()
