"""
Client for a self-hosted categorization model.

The endpoint takes {text, amount, paymentMethod, categories} and answers with
{category, confidence, reason}.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.config import CategorizationConfig
from app.schemas.categorization import AdapterResponse
from app.services.errors import AdapterNotConfigured, AdapterTimeout, UpstreamError

logger = logging.getLogger(__name__)


class LocalModelClient:

    def __init__(self, config: CategorizationConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = config.local_model_url
        self.timeout = config.adapter_timeout_seconds
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.url)

    async def categorize(
        self,
        text: str,
        amount: Optional[float],
        payment_method: Optional[str],
        categories: List[str]
    ) -> Optional[AdapterResponse]:
        if not self.is_configured:
            raise AdapterNotConfigured("local model url not configured")

        body: Dict[str, Any] = {
            "text": text,
            "amount": amount,
            "paymentMethod": payment_method,
            "categories": categories,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=body)
        except httpx.TimeoutException as e:
            raise AdapterTimeout(f"no answer within {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.warning(f"Local model request failed: {e!r}")
            raise UpstreamError(f"request failed: {e!r}") from e

        if response.status_code >= 400:
            excerpt = response.text[:200]
            raise UpstreamError(f"HTTP {response.status_code}: {excerpt}", response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"invalid JSON body: {e}") from e

        return AdapterResponse.parse_payload(payload)
