"""Code assistant quota collector."""

from typing import Dict

from ..utils.errors import ConfigurationMissing
from .base import BaseCollector
from .responses import CodeQuotaResponse


class CodeQuotaCollector(BaseCollector):
    """Collector for code assistant quotas reported as percentage remaining."""

    provider = "code_quota"
    response_model = CodeQuotaResponse

    async def _build_headers(self) -> Dict[str, str]:
        if not self.config.api_key:
            raise ConfigurationMissing("GITHUB_TOKEN", provider=self.provider)
        return {"Authorization": f"Bearer {self.config.api_key}"}
