import logging
import litellm
from typing import Optional, Dict, Any, List
import json

from app.ai.prompts import CATEGORIZATION_SYSTEM, CATEGORIZATION_USER
from app.config import CategorizationConfig
from app.schemas.categorization import AdapterResponse
from app.services.errors import AdapterNotConfigured, UpstreamError

logger = logging.getLogger(__name__)

litellm.drop_params = True


def strip_code_fences(response: str) -> str:
    cleaned = response.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


class AIClient:
    """Chat-completion client for the remote (OpenAI) categorization tier."""

    def __init__(self, config: CategorizationConfig):
        self.model = config.ai_model
        self.api_key = config.openai_api_key
        self.api_base = config.ai_base_url

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 200,
        json_mode: bool = False
    ) -> str:
        if not self.is_configured:
            raise AdapterNotConfigured("openai api key not configured")

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "api_key": self.api_key,
        }
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as e:
            logger.error(f"AI completion error: {e}")
            raise UpstreamError(str(e), getattr(e, "status_code", None)) from e

        try:
            return response.choices[0].message.content or ""
        except (AttributeError, IndexError, TypeError) as e:
            raise UpstreamError(f"unexpected completion shape: {e}") from e

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 200
    ) -> Any:
        response = await self.complete(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=True
        )

        try:
            return json.loads(strip_code_fences(response))
        except json.JSONDecodeError as e:
            raise UpstreamError(f"model returned invalid JSON: {e}") from e

    async def categorize(
        self,
        text: str,
        amount: Optional[float],
        payment_method: Optional[str],
        categories: List[str]
    ) -> Optional[AdapterResponse]:
        system_prompt = CATEGORIZATION_SYSTEM.format(
            categories="\n".join(f"- {name}" for name in categories)
        )
        user_prompt = CATEGORIZATION_USER.format(
            text=text or "(empty)",
            amount=abs(amount) if amount is not None else "unknown",
            payment_method=payment_method or "unknown"
        )

        payload = await self.complete_json(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=0.1,
            max_tokens=200
        )
        return AdapterResponse.parse_payload(payload)
