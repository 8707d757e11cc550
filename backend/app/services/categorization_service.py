"""
Tiered expense categorization.

Tiers run in order and the first positive answer wins:

1. merchant dictionary (fuzzy, per-user + global)
2. static keyword rules
3. depending on mode: nothing, the local model, the local model then OpenAI,
   or OpenAI directly

Model calls are capped by a hard deadline. Whatever happens underneath,
categorize() returns a CategorizationResult and never raises.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Optional, Protocol, List, Tuple, Union

from sqlalchemy.orm import Session

from app.config import CategorizationConfig, CategorizationMode
from app.schemas.categorization import AdapterResponse, CategorizationResult
from app.services.categories import CATEGORIES, UNCATEGORIZED, snap_category
from app.services.errors import AdapterNotConfigured, AdapterTimeout, UpstreamError
from app.services.keyword_rules import match_keyword_rule
from app.services.merchant_dictionary import match_merchant

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.2
NO_RULES_MATCHED = "no rules matched"
OPENAI_NOT_CONFIGURED = "openai api key not configured"


class ModelAdapter(Protocol):
    """What the engine needs from a model-backed tier."""

    @property
    def is_configured(self) -> bool: ...

    async def categorize(
        self,
        text: str,
        amount: Optional[float],
        payment_method: Optional[str],
        categories: List[str]
    ) -> Optional[AdapterResponse]: ...


def uncategorized(reason: str) -> CategorizationResult:
    return CategorizationResult(category=UNCATEGORIZED, confidence=FALLBACK_CONFIDENCE, reason=reason)


class CategorizationEngine:
    """Runs the dictionary -> rules -> model fallback chain for one request."""

    def __init__(
        self,
        db: Session,
        config: CategorizationConfig,
        local_adapter: Optional[ModelAdapter] = None,
        remote_adapter: Optional[ModelAdapter] = None
    ):
        self.db = db
        self.config = config
        self.local_adapter = local_adapter
        self.remote_adapter = remote_adapter

    async def categorize(
        self,
        user_id: str,
        amount: Optional[Union[Decimal, float]],
        description: Optional[str],
        merchant: Optional[str],
        payment_method: Optional[str] = None
    ) -> CategorizationResult:
        try:
            return await self._categorize(user_id, amount, description, merchant, payment_method)
        except Exception as e:
            logger.exception("Categorization failed unexpectedly")
            return uncategorized(f"categorization failed: {type(e).__name__}")

    async def _categorize(
        self,
        user_id: str,
        amount: Optional[Union[Decimal, float]],
        description: Optional[str],
        merchant: Optional[str],
        payment_method: Optional[str]
    ) -> CategorizationResult:
        description = description or ""
        merchant = merchant or ""

        result = self._dictionary_tier(user_id, merchant, description)
        if result:
            return result

        result = match_keyword_rule(description, merchant)
        if result:
            return result

        text = " ".join(part.strip() for part in (merchant, description) if part.strip())
        amount_value = float(amount) if amount is not None else None
        mode = self.config.mode

        if mode == CategorizationMode.rules_only:
            return uncategorized(NO_RULES_MATCHED)

        failure = None
        if mode in (CategorizationMode.rules_plus_local, CategorizationMode.rules_plus_local_then_openai):
            result, failure = await self._call_adapter(
                self.local_adapter, "local model", text, amount_value, payment_method
            )
            if result:
                return result
            if mode == CategorizationMode.rules_plus_local:
                return uncategorized(failure or NO_RULES_MATCHED)
            logger.debug(f"Local model gave no result ({failure}), trying openai")

        if self.remote_adapter is None or not self.remote_adapter.is_configured:
            if failure:
                return uncategorized(f"{failure}; {OPENAI_NOT_CONFIGURED}")
            return uncategorized(OPENAI_NOT_CONFIGURED)

        result, failure = await self._call_adapter(
            self.remote_adapter, "openai", text, amount_value, payment_method
        )
        return result or uncategorized(failure or OPENAI_NOT_CONFIGURED)

    def _dictionary_tier(self, user_id: str, merchant: str, description: str) -> Optional[CategorizationResult]:
        try:
            return match_merchant(
                self.db,
                user_id,
                merchant,
                description,
                min_score=self.config.min_match_score,
                scan_limit=self.config.scan_limit,
                locale_suffix=self.config.locale_suffix
            )
        except Exception as e:
            logger.warning(f"Dictionary tier failed, falling through to rules: {e}")
            return None

    async def _call_adapter(
        self,
        adapter: Optional[ModelAdapter],
        label: str,
        text: str,
        amount: Optional[float],
        payment_method: Optional[str]
    ) -> Tuple[Optional[CategorizationResult], Optional[str]]:
        """
        Run one adapter under the deadline.

        Returns (result, None) on success or (None, diagnostic) when the
        adapter is missing, slow, broken or had nothing to say.
        """
        if adapter is None or not adapter.is_configured:
            return None, None

        timeout = self.config.adapter_timeout_seconds
        try:
            response = await asyncio.wait_for(
                adapter.categorize(text, amount, payment_method, list(CATEGORIES)),
                timeout=timeout
            )
        except (asyncio.TimeoutError, AdapterTimeout):
            logger.warning(f"{label} did not answer within {timeout}s")
            return None, f"{label} timed out"
        except AdapterNotConfigured:
            return None, None
        except UpstreamError as e:
            logger.warning(f"{label} error: {e}")
            return None, f"{label} error: {e}"
        except Exception as e:
            logger.warning(f"{label} failed: {e!r}")
            return None, f"{label} failed: {type(e).__name__}"

        if response is None:
            return None, f"{label} returned no usable category"

        return CategorizationResult(
            category=snap_category(response.category),
            confidence=response.confidence,
            reason=response.reason or f"categorized by {label}",
        ), None


def build_categorization_engine(db: Session, config: CategorizationConfig) -> CategorizationEngine:
    """Wire the engine with the adapters the configured mode can reach."""
    from app.ai.client import AIClient
    from app.ai.local_client import LocalModelClient

    return CategorizationEngine(
        db,
        config,
        local_adapter=LocalModelClient(config),
        remote_adapter=AIClient(config)
    )
