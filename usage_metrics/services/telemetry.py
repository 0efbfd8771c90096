"""OpenTelemetry meter provider handle and gauge recording."""

import logging
import math
from typing import Dict, Optional, Sequence

from opentelemetry.metrics import Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import Resource

from ..config.models import TelemetryConfig
from ..utils.metrics import Metric
from ..utils.reset_time import ResetUnit

METER_NAME = "usage_metrics"
METRIC_NAME_LABEL = "metric_name"


class GaugeRecorder:
    """
    Records normalized metrics as gauge samples.

    Each provider gets a value gauge and, when it tracks reset times, a
    countdown gauge. Samples carry a single ``metric_name`` attribute equal
    to the bucket name.
    """

    def __init__(self, meter: Meter, logger: logging.Logger):
        self.meter = meter
        self.logger = logger.getChild("GaugeRecorder")
        self._value_gauges: Dict[str, object] = {}
        self._reset_gauges: Dict[str, object] = {}

    def register_provider(
        self,
        provider: str,
        value_unit: str = "1",
        value_kind: str = "utilization",
        reset_unit: Optional[ResetUnit] = None
    ) -> None:
        """
        Create the gauges for one provider.

        Args:
            provider: Provider key, used as gauge name prefix
            value_unit: Unit of the value gauge
            value_kind: Suffix of the value gauge name
            reset_unit: Countdown unit, or None if the provider has no reset times
        """
        self._value_gauges[provider] = self.meter.create_gauge(
            name=f"{provider}.{value_kind}",
            unit=value_unit,
            description=f"{provider} {value_kind} per quota bucket"
        )
        if reset_unit is not None:
            self._reset_gauges[provider] = self.meter.create_gauge(
                name=f"{provider}.time_to_reset",
                unit=reset_unit.otel_unit,
                description=f"Time until each {provider} quota bucket resets"
            )

    def record(self, provider: str, metric: Metric) -> None:
        """
        Record one metric and emit its structured log line.

        Args:
            provider: Provider key the gauges were registered under
            metric: Normalized metric

        Raises:
            KeyError: If the provider was never registered
        """
        attributes = {METRIC_NAME_LABEL: metric.name}
        self._value_gauges[provider].set(metric.utilization, attributes)

        if metric.time_to_reset is not None and provider in self._reset_gauges:
            self._reset_gauges[provider].set(metric.time_to_reset, attributes)

        self.logger.info(
            "Recorded metric",
            extra={
                "provider": provider,
                "metric_name": metric.name,
                "utilization": metric.utilization,
                "time_to_reset": metric.time_to_reset
            }
        )


class Telemetry:
    """
    Explicitly constructed telemetry handle scoped around one collection run.

    Use as a context manager so pending samples are flushed and the meter
    provider is shut down on every exit path.
    """

    def __init__(
        self,
        config: TelemetryConfig,
        logger: logging.Logger,
        readers: Optional[Sequence[MetricReader]] = None
    ):
        """
        Initialize telemetry.

        Args:
            config: Telemetry configuration
            logger: Logger instance
            readers: Metric readers to attach; built from config when None
        """
        self.config = config
        self.logger = logger.getChild("Telemetry")

        if readers is None:
            readers = [self._build_reader(config)]

        resource = Resource.create({"service.name": config.service_name})
        self.meter_provider = MeterProvider(resource=resource, metric_readers=list(readers))
        self.recorder = GaugeRecorder(self.meter_provider.get_meter(METER_NAME), logger)
        self._shut_down = False

    def _build_reader(self, config: TelemetryConfig) -> MetricReader:
        if config.otlp_endpoint:
            from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter

            endpoint = config.otlp_endpoint.rstrip("/")
            if not endpoint.endswith("/v1/metrics"):
                endpoint = f"{endpoint}/v1/metrics"
            self.logger.info(f"Exporting metrics via OTLP to {endpoint}")
            exporter = OTLPMetricExporter(endpoint=endpoint)
        else:
            self.logger.info("No OTLP endpoint configured, exporting metrics to console")
            exporter = ConsoleMetricExporter()

        # The job flushes explicitly on exit; no periodic export is needed
        return PeriodicExportingMetricReader(
            exporter,
            export_interval_millis=math.inf,
            export_timeout_millis=config.export_timeout_millis
        )

    def shutdown(self) -> None:
        """Flush pending samples and shut the meter provider down. Idempotent."""
        if self._shut_down:
            return
        self._shut_down = True

        timeout = self.config.export_timeout_millis
        try:
            if not self.meter_provider.force_flush(timeout_millis=timeout):
                self.logger.warning("Metric flush did not complete before timeout")
        finally:
            self.meter_provider.shutdown(timeout_millis=timeout)
            self.logger.info("Telemetry shut down")

    def __enter__(self) -> "Telemetry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
