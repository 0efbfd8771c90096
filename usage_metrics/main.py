"""Main application entry point for the usage metrics job."""

import argparse
import asyncio
import logging
import os
import sys
import time
from typing import Optional

from .config.loader import ConfigLoader
from .config.models import UsageMetricsConfig
from .services.cookie_client import CookieClient
from .services.telemetry import Telemetry
from .utils.logger import setup_logger
from .utils.metrics import CollectionOutcome
from .workflow import CollectionOrchestrator, build_collectors


async def run_collection(
    config: UsageMetricsConfig,
    logger: logging.Logger,
    telemetry: Optional[Telemetry] = None
) -> CollectionOutcome:
    """
    Execute one collection cycle.

    The telemetry handle is flushed and shut down when the cycle ends,
    whether it succeeded, failed or raised.

    Args:
        config: Job configuration
        logger: Logger instance
        telemetry: Telemetry handle; built from config when None

    Returns:
        CollectionOutcome: Aggregate verdict
    """
    telemetry = telemetry or Telemetry(config.telemetry, logger)

    with telemetry:
        cookie_client = CookieClient(config.cookie_service, logger)
        collectors = build_collectors(config, telemetry.recorder, cookie_client, logger)
        orchestrator = CollectionOrchestrator(collectors, logger)

        start_time = time.time()
        outcome = await orchestrator.run_all()
        logger.info(f"Duration: {time.time() - start_time:.1f}s")

    return outcome


def load_config(config_path: Optional[str]) -> UsageMetricsConfig:
    if config_path:
        return ConfigLoader.load_from_file(config_path)
    return ConfigLoader.load_from_env()


def main(argv=None) -> int:
    """
    CLI entry point.

    Collects once and returns the process exit code: 0 when every provider
    succeeded, 1 otherwise.
    """
    parser = argparse.ArgumentParser(
        description='Collect provider usage quotas and export them as OpenTelemetry gauges',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Configure from environment variables
  CLAUDE_ORG_ID=... COOKIE_SERVICE_ADDR=cookies:50051 usage-metrics

  # Use a YAML config file (${ENV_VAR} placeholders are substituted)
  usage-metrics --config /path/to/config.yaml
        """
    )

    parser.add_argument(
        '--config',
        default=None,
        help='Path to YAML configuration file (default: environment variables only)'
    )

    parser.add_argument(
        '--log-level',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: LOG_LEVEL env var or INFO)'
    )

    args = parser.parse_args(argv)

    logger = setup_logger("usage_metrics", args.log_level or os.getenv('LOG_LEVEL', 'INFO'))

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}", exc_info=True)
        return 1

    if args.log_level is None:
        logger.setLevel(config.log_level)

    outcome = asyncio.run(run_collection(config, logger))

    if not outcome.ok:
        logger.error(
            f"Collection failed: {outcome.message}",
            extra={"failed_providers": sorted(outcome.failures)}
        )
        return 1

    logger.info("Collection succeeded")
    return 0


if __name__ == '__main__':
    sys.exit(main())
