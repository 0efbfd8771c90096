"""Credit balance collector."""

from typing import Dict

from ..utils.errors import ConfigurationMissing
from .base import BaseCollector
from .responses import CreditBalanceResponse


class CreditBalanceCollector(BaseCollector):
    """Collector for purchased credits and their usage. No reset times."""

    provider = "credit_balance"
    response_model = CreditBalanceResponse
    value_kind = "value"
    value_unit = "{credit}"

    async def _build_headers(self) -> Dict[str, str]:
        if not self.config.api_key:
            raise ConfigurationMissing("OPENROUTER_API_KEY", provider=self.provider)
        return {"Authorization": f"Bearer {self.config.api_key}"}
