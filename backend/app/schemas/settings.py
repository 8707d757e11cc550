from pydantic import BaseModel


class CategorizationSettings(BaseModel):
    mode: str
    min_match_score: float
    scan_limit: int
    adapter_timeout_seconds: float
    ai_model: str
    local_model_configured: bool
    openai_configured: bool
