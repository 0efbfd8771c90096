"""Base collector abstract class for all provider collectors."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Type
import logging
from functools import wraps

import httpx
from pydantic import BaseModel, ValidationError

from ..services.telemetry import GaugeRecorder
from ..utils.errors import ResponseUnparsable, UpstreamRejected, UpstreamUnreachable, UsageMetricsError
from ..utils.metrics import CollectorResult, Metric
from ..utils.reset_time import ResetUnit
from .normalizers import NORMALIZERS


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def safe_collect(func):
    """
    Decorator turning collector exceptions into a failed CollectorResult.

    Provider errors (UsageMetricsError) are expected and carry their own
    context. Anything else is logged with its traceback before being
    reported the same way.

    Args:
        func: Collector method to wrap

    Returns:
        Wrapped coroutine function that never raises Exception
    """
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except UsageMetricsError as e:
            return CollectorResult(provider=self.provider, error=str(e))
        except Exception as e:
            self.logger.error(f"Collection failed: {e}", exc_info=True)
            return CollectorResult(
                provider=self.provider,
                error=f"Unexpected error: {type(e).__name__}: {e}"
            )
    return wrapper


class BaseCollector(ABC):
    """
    Abstract base class for all collectors.

    A collector fetches one provider's usage endpoint, parses the body into
    ``response_model``, normalizes it, and records every resulting metric.
    """

    provider: str = "unknown"
    response_model: Type[BaseModel]
    value_kind: str = "utilization"
    value_unit: str = "1"

    def __init__(
        self,
        config: Any,
        recorder: GaugeRecorder,
        logger: logging.Logger,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize base collector.

        Args:
            config: Provider-specific configuration
            recorder: Gauge recorder shared by all collectors
            logger: Logger instance
            clock: Source of the current instant
        """
        self.config = config
        self.recorder = recorder
        self.clock = clock
        self.logger = logger.getChild(self.__class__.__name__)

        self.recorder.register_provider(
            self.provider,
            value_unit=self.value_unit,
            value_kind=self.value_kind,
            reset_unit=self.reset_unit
        )

    @property
    def reset_unit(self) -> Optional[ResetUnit]:
        """Countdown unit, or None when the provider has no reset times."""
        return getattr(self.config, "reset_unit", None)

    @abstractmethod
    async def _build_headers(self) -> Dict[str, str]:
        """
        Acquire credentials and build the auth headers.

        Returns:
            Dict[str, str]: Provider-specific headers

        Raises:
            ConfigurationMissing: If a required credential is absent
            UpstreamUnreachable: If a credential source cannot be reached
        """
        pass

    def normalize(self, raw: BaseModel, now: datetime) -> List[Metric]:
        """Map the parsed response onto metrics with this provider's normalizer."""
        return NORMALIZERS[self.provider](raw, now, self.reset_unit or ResetUnit.SECONDS)

    def _url(self) -> str:
        return self.config.url

    @safe_collect
    async def collect(self) -> CollectorResult:
        """
        Fetch, normalize and record this provider's usage.

        Returns:
            CollectorResult: Recorded metrics, or the error of the failed step
        """
        headers = {
            "User-Agent": self.config.user_agent,
            "Accept": "application/json",
        }
        headers.update(await self._build_headers())

        body = await self._fetch(self._url(), headers)
        raw = self._parse(body)
        metrics = self.normalize(raw, self.clock())

        for metric in metrics:
            self.recorder.record(self.provider, metric)

        self.logger.info(f"Recorded {len(metrics)} metric(s)", extra={"provider": self.provider})
        return CollectorResult(provider=self.provider, metrics=metrics)

    async def _fetch(self, url: str, headers: Dict[str, str]) -> str:
        """
        Issue the GET request and return the body of a successful response.

        Raises:
            UpstreamUnreachable: On connection failure or timeout
            UpstreamRejected: On a non-2xx status
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    url,
                    headers=headers,
                    timeout=self.config.timeout_seconds,
                    follow_redirects=True
                )
        except httpx.TimeoutException as e:
            raise UpstreamUnreachable(
                f"Request to {url} timed out after {self.config.timeout_seconds}s",
                provider=self.provider,
                step="request"
            ) from e
        except httpx.RequestError as e:
            raise UpstreamUnreachable(
                f"Request to {url} failed: {e}",
                provider=self.provider,
                step="request"
            ) from e

        if not 200 <= response.status_code < 300:
            raise UpstreamRejected(response.status_code, response.text, provider=self.provider, url=url)

        return response.text

    def _parse(self, body: str) -> BaseModel:
        """
        Parse the body into the provider's response model.

        Raises:
            ResponseUnparsable: If the body is not valid JSON of the expected shape
        """
        try:
            return self.response_model.model_validate_json(body)
        except ValidationError as e:
            raise ResponseUnparsable(
                f"{e.error_count()} validation error(s) for {self.response_model.__name__}",
                body,
                provider=self.provider
            ) from e
