"""Concurrent collection across all providers."""

import asyncio
import logging
from typing import List

from .collectors.assistant_usage_collector import AssistantUsageCollector
from .collectors.base import BaseCollector
from .collectors.code_quota_collector import CodeQuotaCollector
from .collectors.credit_balance_collector import CreditBalanceCollector
from .config.models import UsageMetricsConfig
from .services.cookie_client import CookieClient
from .services.telemetry import GaugeRecorder
from .utils.logger import setup_logger
from .utils.metrics import CollectionOutcome, CollectorResult


def build_collectors(
    config: UsageMetricsConfig,
    recorder: GaugeRecorder,
    cookie_client: CookieClient,
    logger: logging.Logger
) -> List[BaseCollector]:
    """
    Construct the collector of every enabled provider.

    Args:
        config: Job configuration
        recorder: Gauge recorder shared by all collectors
        cookie_client: Cookie source for cookie-authenticated providers
        logger: Logger instance

    Returns:
        List[BaseCollector]: Collectors in provider declaration order
    """
    providers = config.providers
    collectors = []

    if providers.assistant_usage.enabled:
        collectors.append(AssistantUsageCollector(
            providers.assistant_usage,
            recorder,
            cookie_client,
            logger
        ))

    if providers.credit_balance.enabled:
        collectors.append(CreditBalanceCollector(providers.credit_balance, recorder, logger))

    if providers.code_quota.enabled:
        collectors.append(CodeQuotaCollector(providers.code_quota, recorder, logger))

    logger.info(f"Initialized {len(collectors)} collector(s)")
    return collectors


class CollectionOrchestrator:
    """
    Runs all provider collectors concurrently and aggregates their outcome.

    Every collector runs to completion; one provider failing or stalling
    never cancels or skips another. Metrics of successful providers are
    recorded by the collectors themselves, whatever the aggregate verdict.
    """

    def __init__(self, collectors: List[BaseCollector], logger: logging.Logger = None):
        """
        Initialize orchestrator.

        Args:
            collectors: Provider collectors to run
            logger: Optional logger instance
        """
        self.collectors = collectors
        self.logger = logger or setup_logger("workflow")

    async def run_all(self) -> CollectionOutcome:
        """
        Collect from all providers in parallel.

        Returns:
            CollectionOutcome: Success, or the combined per-provider failures
        """
        self.logger.info(f"Starting parallel collection from {len(self.collectors)} collector(s)")

        results = await asyncio.gather(
            *(collector.collect() for collector in self.collectors),
            return_exceptions=True
        )

        collector_results = []
        for collector, result in zip(self.collectors, results):
            if isinstance(result, BaseException):
                # collect() is wrapped by safe_collect; only cancellation lands here
                result = CollectorResult(
                    provider=collector.provider,
                    error=f"Collector aborted: {type(result).__name__}: {result}"
                )
            collector_results.append(result)

        for result in collector_results:
            if not result.ok:
                self.logger.error(
                    f"Provider '{result.provider}' failed: {result.error}",
                    extra={"provider": result.provider, "error": result.error}
                )

        outcome = CollectionOutcome.from_results(collector_results)
        recorded = sum(len(r.metrics) for r in collector_results)
        self.logger.info(
            f"Collection complete: {recorded} metric(s) recorded, "
            f"{len(outcome.failures)} provider(s) failed"
        )
        return outcome
