from __future__ import annotations

import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from resume_api.ai.errors import LLMBackendError
from resume_api.ai.types import PromptPayload
from resume_api.core.config import settings

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Chat-completions invoker. SDK-level retries are disabled; see ``resume_api.ai.retry``."""

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_output_tokens: int = 2048,
        response_format: str = "json",
        client: Optional[AsyncOpenAI] = None,
    ):
        self._model = model
        self._max_output_tokens = max_output_tokens
        self._response_format = (response_format or "").strip().lower()
        if client is not None:
            self._client = client
            return

        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, prompt: PromptPayload) -> str:
        create_kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in prompt.as_messages()],
            "max_completion_tokens": self._max_output_tokens,
        }
        if self._response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except openai.APIStatusError as exc:
            raise LLMBackendError(_error_message(exc), status_code=exc.status_code) from exc
        except openai.APIConnectionError as exc:
            raise LLMBackendError(f"Backend connection failed: {exc}") from exc
        except openai.OpenAIError as exc:
            raise LLMBackendError(f"Unexpected backend error: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.info("openai_empty_completion model=%s", self._model)
            return "{}"
        return content

    async def aclose(self) -> None:
        await self._client.close()


def _error_message(exc: openai.APIStatusError) -> str:
    message = getattr(exc, "message", None) or str(exc)
    return message.strip() or f"Backend returned HTTP {exc.status_code}"


def from_settings() -> OpenAIProvider:
    return OpenAIProvider(
        model=settings.ai_model,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout_s=settings.openai_timeout_s,
        max_output_tokens=settings.llm_max_output_tokens,
        response_format=settings.llm_response_format,
    )
