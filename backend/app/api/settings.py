from fastapi import APIRouter, Depends

from app.config import CategorizationConfig
from app.dependencies import get_categorization_config
from app.schemas.settings import CategorizationSettings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=CategorizationSettings)
def get_settings(config: CategorizationConfig = Depends(get_categorization_config)):
    return CategorizationSettings(
        mode=config.mode.value,
        min_match_score=config.min_match_score,
        scan_limit=config.scan_limit,
        adapter_timeout_seconds=config.adapter_timeout_seconds,
        ai_model=config.ai_model,
        local_model_configured=bool(config.local_model_url),
        openai_configured=bool(config.openai_api_key),
    )
