"""Map provider responses onto uniform Metric records."""

from datetime import datetime
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from ..utils.metrics import Metric
from ..utils.reset_time import ResetUnit, date_reset_at, time_until
from .responses import AssistantUsageResponse, CodeQuotaResponse, CreditBalanceResponse

# Declared bucket order; output follows it
ASSISTANT_USAGE_BUCKETS = (
    "five_hour",
    "seven_day",
    "seven_day_oauth_apps",
    "seven_day_opus",
    "seven_day_sonnet",
)

CODE_QUOTA_SNAPSHOTS = (
    "chat",
    "completions",
    "premium_interactions",
)


def normalize_assistant_usage(
    raw: AssistantUsageResponse,
    now: datetime,
    unit: ResetUnit = ResetUnit.SECONDS
) -> List[Metric]:
    """
    Normalize an assistant usage response.

    Buckets that are absent, or present without a utilization value, are
    skipped. Utilization is already a fraction and passes through.

    Args:
        raw: Parsed response
        now: Current instant
        unit: Unit of the reset countdown

    Returns:
        List[Metric]: One metric per tracked bucket, in declared order
    """
    metrics = []
    for name in ASSISTANT_USAGE_BUCKETS:
        bucket = getattr(raw, name)
        if bucket is None or bucket.utilization is None:
            continue
        metrics.append(Metric(
            name=name,
            utilization=bucket.utilization,
            time_to_reset=time_until(bucket.resets_at, now, unit)
        ))
    return metrics


def normalize_credit_balance(
    raw: CreditBalanceResponse,
    now: Optional[datetime] = None,
    unit: ResetUnit = ResetUnit.SECONDS
) -> List[Metric]:
    """
    Credits, usage and their difference as plain values; no reset times.

    ``now`` and ``unit`` are unused and keep the signature shared by every
    entry in NORMALIZERS.
    """
    data = raw.data
    return [
        Metric(name="total_credits", utilization=data.total_credits),
        Metric(name="total_usage", utilization=data.total_usage),
        Metric(name="remaining", utilization=data.total_credits - data.total_usage),
    ]


def normalize_code_quota(
    raw: CodeQuotaResponse,
    now: datetime,
    unit: ResetUnit = ResetUnit.MINUTES
) -> List[Metric]:
    """
    Normalize a code assistant quota response.

    Snapshots report percentage remaining, so utilization is
    ``1 - percent_remaining / 100``. All snapshots share one reset date,
    which is taken as midnight UTC. Unlimited snapshots have no quota and
    are skipped.

    Args:
        raw: Parsed response
        now: Current instant
        unit: Unit of the reset countdown

    Returns:
        List[Metric]: One metric per limited snapshot, in declared order
    """
    time_to_reset = time_until(date_reset_at(raw.quota_reset_date), now, unit)

    metrics = []
    for name in CODE_QUOTA_SNAPSHOTS:
        snapshot = getattr(raw.quota_snapshots, name)
        if snapshot is None or snapshot.unlimited or snapshot.percent_remaining is None:
            continue
        metrics.append(Metric(
            name=name,
            utilization=1 - snapshot.percent_remaining / 100,
            time_to_reset=time_to_reset
        ))
    return metrics


Normalizer = Callable[[BaseModel, datetime, ResetUnit], List[Metric]]

NORMALIZERS: Dict[str, Normalizer] = {
    "assistant_usage": normalize_assistant_usage,
    "credit_balance": normalize_credit_balance,
    "code_quota": normalize_code_quota,
}
