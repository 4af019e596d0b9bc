from __future__ import annotations

import json
from typing import Any

from resume_api.ai.types import PromptPayload

FULL_SECTIONS = {
    name: {"present": True, "score": 70, "issues": [], "suggestions": ["Tighten wording"]}
    for name in ("skills", "experience", "education", "keywords", "formatting")
}


class FakeInvoker:
    """Replays scripted outputs; an Exception entry is raised instead of returned."""

    def __init__(self, *responses: Any):
        self._responses = list(responses)
        self.prompts: list[PromptPayload] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: PromptPayload) -> str:
        self.prompts.append(prompt)
        if not self._responses:
            raise AssertionError("FakeInvoker ran out of scripted responses")
        item = self._responses[0] if len(self._responses) == 1 else self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, dict):
            return json.dumps(item)
        return item

    async def aclose(self) -> None:
        self.closed = True


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
