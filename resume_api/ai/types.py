from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol


Role = Literal["system", "user"]


class AnalysisTask(str, Enum):
    ANALYZE = "analyze"
    MATCH_JOB_DESCRIPTION = "match-jd"
    IMPROVE = "improve"
    INTERVIEW_QUESTIONS = "interview-questions"
    COVER_LETTER = "cover-letter"


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class PromptPayload:
    system_instruction: str
    user_content: str

    def as_messages(self) -> list[ChatMessage]:
        return [
            ChatMessage(role="system", content=self.system_instruction),
            ChatMessage(role="user", content=self.user_content),
        ]


class ModelInvoker(Protocol):
    """One call to a generative-text backend; implementations never retry."""

    async def complete(self, prompt: PromptPayload) -> str: ...

    async def aclose(self) -> None: ...
