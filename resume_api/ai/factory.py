from resume_api.ai.providers import openai_provider
from resume_api.ai.types import ModelInvoker
from resume_api.core.config import settings


def get_ai_client() -> ModelInvoker:
    provider = settings.ai_provider

    if provider == "openai":
        return openai_provider.from_settings()

    raise ValueError(f"Unsupported AI_PROVIDER='{provider}'")
