"""Generation request and attempt data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal


@dataclass(frozen=True)
class Turn:
    """One prior message supplied to the backend as context."""

    role: Literal["user", "assistant"]
    text: str


@dataclass
class GenerationRequest:
    """Everything the invoker needs for one inbound message."""

    system_prompt: str
    user_text: str
    model_candidates: list[str]
    prior_turns: list[Turn] = field(default_factory=list)
    max_output_tokens: int = 500
    timeout_ms: int = 30000

    def to_messages(self) -> list[dict]:
        """Prior turns followed by the user text, in chat-message format."""
        messages = [{"role": turn.role, "content": turn.text} for turn in self.prior_turns]
        messages.append({"role": "user", "content": self.user_text})
        return messages


class AttemptStatus(str, Enum):
    """Result of one generation attempt."""

    OK = "ok"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass
class AttemptOutcome:
    """One try against one model candidate."""

    model: str
    attempt: int
    status: AttemptStatus
    text: str = ""
    cause: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is AttemptStatus.OK


@dataclass
class DeliveryReport:
    """Per-reply chunk delivery tally."""

    total: int = 0
    sent: int = 0
    failed: int = 0

    @property
    def complete(self) -> bool:
        return self.failed == 0
