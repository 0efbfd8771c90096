"""AI assistant usage dashboard collector."""

import logging
from datetime import datetime
from typing import Callable, Dict

from ..config.models import AssistantUsageConfig
from ..services.cookie_client import CookieClient
from ..services.telemetry import GaugeRecorder
from ..utils.errors import ConfigurationMissing
from .base import BaseCollector, utc_now
from .responses import AssistantUsageResponse


class AssistantUsageCollector(BaseCollector):
    """Collector for per-window usage of the AI assistant, cookie authenticated."""

    provider = "assistant_usage"
    response_model = AssistantUsageResponse

    def __init__(
        self,
        config: AssistantUsageConfig,
        recorder: GaugeRecorder,
        cookie_client: CookieClient,
        logger: logging.Logger,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize assistant usage collector.

        Args:
            config: Assistant usage configuration
            recorder: Gauge recorder
            cookie_client: Source of the session cookies
            logger: Logger instance
            clock: Source of the current instant
        """
        super().__init__(config, recorder, logger, clock)
        self.cookie_client = cookie_client

    def _url(self) -> str:
        return self.config.url.format(org_id=self.config.org_id)

    async def _build_headers(self) -> Dict[str, str]:
        if not self.config.org_id:
            raise ConfigurationMissing("CLAUDE_ORG_ID", provider=self.provider)

        cookies = await self.cookie_client.get_cookies(self.config.cookie_host, provider=self.provider)
        return {"Cookie": cookies}
