"""Generation invoker: ordered model fallback with per-attempt timeouts."""

import asyncio
from typing import Protocol

from ..logging_config import get_logger
from ..models import AttemptOutcome, AttemptStatus, GenerationRequest
from .extraction import extract_text
from .llm_provider import ILLMProvider

logger = get_logger(__name__)

DEFAULT_ATTEMPTS_PER_MODEL = 2


class GenerationExhausted(Exception):
    """Every try of every model candidate failed, timed out or came back empty."""

    def __init__(self, attempts: list[AttemptOutcome]):
        self.attempts = attempts
        super().__init__(
            f"All generation attempts failed "
            f"({self.attempt_count} attempts across {len(self.models)} models)"
        )

    @property
    def models(self) -> list[str]:
        return list(dict.fromkeys(a.model for a in self.attempts))

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)


class IGenerationInvoker(Protocol):
    """Bounded fallback/retry/timeout wrapper around a provider."""

    async def invoke(self, request: GenerationRequest) -> str:
        """Return the first non-empty reply or raise GenerationExhausted."""
        ...


class GenerationInvoker:
    """Tries each model candidate in order, a fixed number of times each."""

    def __init__(
        self,
        provider: ILLMProvider,
        attempts_per_model: int = DEFAULT_ATTEMPTS_PER_MODEL,
    ):
        self._provider = provider
        self._attempts_per_model = max(1, attempts_per_model)

    async def invoke(self, request: GenerationRequest) -> str:
        """Return the first non-empty reply or raise GenerationExhausted."""
        attempts: list[AttemptOutcome] = []

        for model in request.model_candidates:
            for attempt in range(1, self._attempts_per_model + 1):
                outcome = await self._attempt(model, attempt, request)
                attempts.append(outcome)

                if outcome.ok:
                    return outcome.text

                logger.warning(
                    "Generation attempt failed",
                    extra={
                        "context": {
                            "model": model,
                            "attempt": attempt,
                            "status": outcome.status.value,
                            "cause": outcome.cause,
                        }
                    },
                )

        raise GenerationExhausted(attempts)

    async def _attempt(
        self, model: str, attempt: int, request: GenerationRequest
    ) -> AttemptOutcome:
        """One call raced against the request deadline."""
        try:
            call = self._provider.generate(
                model=model,
                messages=request.to_messages(),
                system=request.system_prompt,
                max_output_tokens=request.max_output_tokens,
            )
            # wait_for cancels the losing call, so its result is never observed
            response = await asyncio.wait_for(call, timeout=request.timeout_ms / 1000)
        except asyncio.TimeoutError:
            return AttemptOutcome(
                model=model,
                attempt=attempt,
                status=AttemptStatus.TIMED_OUT,
                cause=f"no response within {request.timeout_ms}ms",
            )
        except Exception as e:
            return AttemptOutcome(
                model=model,
                attempt=attempt,
                status=AttemptStatus.FAILED,
                cause=str(e) or type(e).__name__,
            )

        text = extract_text(response)
        if not text:
            return AttemptOutcome(
                model=model,
                attempt=attempt,
                status=AttemptStatus.FAILED,
                cause="empty response",
            )

        return AttemptOutcome(
            model=model, attempt=attempt, status=AttemptStatus.OK, text=text
        )
