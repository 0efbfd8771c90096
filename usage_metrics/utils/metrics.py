"""Metric data structures for collectors."""

from dataclasses import dataclass, field
from typing import Optional, Dict, List


@dataclass(frozen=True)
class Metric:
    """Normalized quota bucket reading shared by all providers."""

    name: str
    utilization: float
    time_to_reset: Optional[float] = None  # In the provider's reset unit


@dataclass
class CollectorResult:
    """Standard result format from all collectors."""

    provider: str
    metrics: List[Metric] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


FAILURE_SEPARATOR = "; "


@dataclass
class CollectionOutcome:
    """Aggregate verdict of one collection cycle."""

    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def message(self) -> str:
        """
        Combined failure message.

        Returns:
            str: "<provider>: <error>" entries joined by FAILURE_SEPARATOR,
                empty when every provider succeeded
        """
        return FAILURE_SEPARATOR.join(
            f"{provider}: {error}" for provider, error in self.failures.items()
        )

    @classmethod
    def from_results(cls, results: List[CollectorResult]) -> "CollectionOutcome":
        return cls(failures={r.provider: r.error for r in results if not r.ok})
