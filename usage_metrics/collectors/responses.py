"""Pydantic models of each provider's usage response body."""

from pydantic import BaseModel, Field
from typing import Optional


class UsageBucket(BaseModel):
    """One quota window of the assistant usage dashboard."""
    utilization: Optional[float] = None  # Fraction 0-1
    resets_at: Optional[str] = None  # RFC 3339


class AssistantUsageResponse(BaseModel):
    """Assistant usage dashboard response. Absent buckets are not tracked."""
    five_hour: Optional[UsageBucket] = None
    seven_day: Optional[UsageBucket] = None
    seven_day_oauth_apps: Optional[UsageBucket] = None
    seven_day_opus: Optional[UsageBucket] = None
    seven_day_sonnet: Optional[UsageBucket] = None


class CreditBalanceData(BaseModel):
    total_credits: float
    total_usage: float


class CreditBalanceResponse(BaseModel):
    """Credit balance API response."""
    data: CreditBalanceData


class QuotaSnapshot(BaseModel):
    """One code assistant quota, reported as percentage remaining."""
    percent_remaining: Optional[float] = None  # 0-100
    unlimited: bool = False


class QuotaSnapshots(BaseModel):
    chat: Optional[QuotaSnapshot] = None
    completions: Optional[QuotaSnapshot] = None
    premium_interactions: Optional[QuotaSnapshot] = None


class CodeQuotaResponse(BaseModel):
    """Code assistant quota response."""
    quota_reset_date: Optional[str] = None  # YYYY-MM-DD
    quota_snapshots: QuotaSnapshots = Field(default_factory=QuotaSnapshots)
