"""Tests for provider response normalizers."""

import pytest
from datetime import datetime, timedelta, timezone

from usage_metrics.collectors.normalizers import (
    ASSISTANT_USAGE_BUCKETS,
    NORMALIZERS,
    normalize_assistant_usage,
    normalize_code_quota,
    normalize_credit_balance,
)
from usage_metrics.collectors.responses import (
    AssistantUsageResponse,
    CodeQuotaResponse,
    CreditBalanceResponse,
)
from usage_metrics.utils.metrics import Metric
from usage_metrics.utils.reset_time import ResetUnit


NOW = datetime(2025, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def at(seconds):
    return (NOW + timedelta(seconds=seconds)).isoformat()


# ---------------------------------------------------------------------------
# Assistant usage
# ---------------------------------------------------------------------------

class TestAssistantUsage:
    def test_all_buckets_absent_yields_nothing(self):
        assert normalize_assistant_usage(AssistantUsageResponse(), NOW) == []

    def test_null_buckets_yield_nothing(self):
        raw = AssistantUsageResponse.model_validate({name: None for name in ASSISTANT_USAGE_BUCKETS})
        assert normalize_assistant_usage(raw, NOW) == []

    def test_future_reset(self):
        raw = AssistantUsageResponse.model_validate({
            "five_hour": {"utilization": 0.75, "resets_at": at(1800)}
        })

        metrics = normalize_assistant_usage(raw, NOW)

        assert len(metrics) == 1
        assert metrics[0].name == "five_hour"
        assert metrics[0].utilization == 0.75
        assert metrics[0].time_to_reset == pytest.approx(1800, abs=1)

    def test_past_reset_is_zero(self):
        raw = AssistantUsageResponse.model_validate({
            "five_hour": {"utilization": 1.0, "resets_at": at(-600)}
        })

        metrics = normalize_assistant_usage(raw, NOW)

        assert metrics == [Metric(name="five_hour", utilization=1.0, time_to_reset=0)]

    def test_null_utilization_is_skipped_not_zero(self):
        raw = AssistantUsageResponse.model_validate({
            "five_hour": {"utilization": None, "resets_at": at(60)},
            "seven_day": {"utilization": 0.0, "resets_at": None},
        })

        metrics = normalize_assistant_usage(raw, NOW)

        assert [m.name for m in metrics] == ["seven_day"]
        assert metrics[0].utilization == 0.0

    @pytest.mark.parametrize("resets_at", [None, "garbage"])
    def test_missing_or_bad_reset_keeps_utilization(self, resets_at):
        raw = AssistantUsageResponse.model_validate({
            "seven_day": {"utilization": 0.3, "resets_at": resets_at}
        })

        metrics = normalize_assistant_usage(raw, NOW)

        assert metrics == [Metric(name="seven_day", utilization=0.3, time_to_reset=None)]

    def test_declared_order_is_preserved(self):
        # Keys deliberately out of order in the payload
        raw = AssistantUsageResponse.model_validate({
            "seven_day_sonnet": {"utilization": 0.4},
            "seven_day": {"utilization": 0.2},
            "five_hour": None,
            "seven_day_opus": {"utilization": 0.3},
        })

        metrics = normalize_assistant_usage(raw, NOW)

        assert [m.name for m in metrics] == ["seven_day", "seven_day_opus", "seven_day_sonnet"]

    def test_unknown_buckets_are_ignored(self):
        raw = AssistantUsageResponse.model_validate({
            "five_hour": {"utilization": 0.1},
            "some_future_bucket": {"utilization": 0.9},
        })

        assert [m.name for m in normalize_assistant_usage(raw, NOW)] == ["five_hour"]

    def test_minutes_unit(self):
        raw = AssistantUsageResponse.model_validate({
            "five_hour": {"utilization": 0.5, "resets_at": at(5400)}
        })

        metrics = normalize_assistant_usage(raw, NOW, ResetUnit.MINUTES)

        assert metrics[0].time_to_reset == pytest.approx(90)


# ---------------------------------------------------------------------------
# Credit balance
# ---------------------------------------------------------------------------

class TestCreditBalance:
    def test_three_values_with_remaining(self):
        raw = CreditBalanceResponse.model_validate({
            "data": {"total_credits": 100.0, "total_usage": 25.5}
        })

        metrics = normalize_credit_balance(raw)

        assert [m.name for m in metrics] == ["total_credits", "total_usage", "remaining"]
        assert [m.utilization for m in metrics] == [100.0, 25.5, 74.5]
        assert all(m.time_to_reset is None for m in metrics)

    def test_overdrawn_balance_is_negative(self):
        raw = CreditBalanceResponse.model_validate({
            "data": {"total_credits": 10, "total_usage": 12.5}
        })

        assert normalize_credit_balance(raw)[2].utilization == pytest.approx(-2.5)


# ---------------------------------------------------------------------------
# Code quota
# ---------------------------------------------------------------------------

class TestCodeQuota:
    def test_remaining_percentage_becomes_used_fraction(self):
        raw = CodeQuotaResponse.model_validate({
            "quota_reset_date": "2025-11-01",
            "quota_snapshots": {
                "chat": {"percent_remaining": 100},
                "completions": {"percent_remaining": 40},
                "premium_interactions": {"percent_remaining": 0},
            }
        })

        metrics = normalize_code_quota(raw, NOW)

        assert [m.name for m in metrics] == ["chat", "completions", "premium_interactions"]
        assert metrics[0].utilization == pytest.approx(0.0)
        assert metrics[1].utilization == pytest.approx(0.6)
        assert metrics[2].utilization == pytest.approx(1.0)

    def test_reset_date_is_midnight_utc_in_minutes(self):
        raw = CodeQuotaResponse.model_validate({
            "quota_reset_date": "2025-10-20",
            "quota_snapshots": {"chat": {"percent_remaining": 50}}
        })

        metrics = normalize_code_quota(raw, NOW)

        # 12:00 -> next midnight
        assert metrics[0].time_to_reset == pytest.approx(720)

    def test_reset_date_in_seconds(self):
        raw = CodeQuotaResponse.model_validate({
            "quota_reset_date": "2025-10-20",
            "quota_snapshots": {"chat": {"percent_remaining": 50}}
        })

        metrics = normalize_code_quota(raw, NOW, ResetUnit.SECONDS)

        assert metrics[0].time_to_reset == pytest.approx(43200)

    def test_unlimited_and_missing_snapshots_are_skipped(self):
        raw = CodeQuotaResponse.model_validate({
            "quota_reset_date": "2025-11-01",
            "quota_snapshots": {
                "chat": {"percent_remaining": 100, "unlimited": True},
                "completions": {"percent_remaining": None},
                "premium_interactions": {"percent_remaining": 75},
            }
        })

        metrics = normalize_code_quota(raw, NOW)

        assert [m.name for m in metrics] == ["premium_interactions"]
        assert metrics[0].utilization == pytest.approx(0.25)

    def test_missing_reset_date_keeps_metrics(self):
        raw = CodeQuotaResponse.model_validate({
            "quota_snapshots": {"chat": {"percent_remaining": 90}}
        })

        metrics = normalize_code_quota(raw, NOW)

        assert len(metrics) == 1
        assert metrics[0].time_to_reset is None

    def test_empty_response(self):
        assert normalize_code_quota(CodeQuotaResponse(), NOW) == []


def test_registry_covers_every_provider():
    assert set(NORMALIZERS) == {"assistant_usage", "credit_balance", "code_quota"}


def test_registry_dispatches_credit_balance_with_shared_arguments():
    raw = CreditBalanceResponse.model_validate({
        "data": {"total_credits": 50, "total_usage": 20}
    })

    metrics = NORMALIZERS["credit_balance"](raw, NOW, ResetUnit.MINUTES)

    assert metrics == normalize_credit_balance(raw)
    assert metrics[2] == Metric(name="remaining", utilization=30)
