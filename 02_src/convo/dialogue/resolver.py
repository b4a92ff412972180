"""Dialogue continuity resolver."""

from typing import Protocol
from weakref import WeakValueDictionary

from ..logging_config import get_logger
from ..models import ConversationSession, Epoch, ResolvedPrompt, Turn
from ..session import ISessionStore
from .classifier import ContinuityRules, build_prompt, classify, detect_followup

logger = get_logger(__name__)


class IContinuityResolver(Protocol):
    """Decides what goes to generation and records what came back."""

    async def resolve(self, conversation_id: str, text: str) -> ResolvedPrompt:
        """Classify text against the session and build the generation input."""
        ...

    async def record(
        self,
        conversation_id: str,
        user_text: str,
        reply: str,
        epoch: Epoch | None = None,
    ) -> ConversationSession | None:
        """Write the completed exchange back to the session store."""
        ...

    async def reset(self, conversation_id: str) -> None:
        """Discard all continuity state for a conversation."""
        ...


class ContinuityResolver:
    """Heuristic follow-up binding on top of a session store."""

    def __init__(self, store: ISessionStore, rules: ContinuityRules | None = None):
        self._store = store
        self._rules = rules or ContinuityRules()
        # Held strongly only by in-flight ResolvedPrompts; reset drops the entry so
        # an exchange started before it cannot be recorded after it.
        self._epochs: WeakValueDictionary[str, Epoch] = WeakValueDictionary()

    @property
    def rules(self) -> ContinuityRules:
        return self._rules

    def epoch(self, conversation_id: str) -> Epoch:
        """Current epoch token for a conversation, created on first use."""
        current = self._epochs.get(conversation_id)
        if current is None:
            current = Epoch()
            self._epochs[conversation_id] = current
        return current

    async def resolve(self, conversation_id: str, text: str) -> ResolvedPrompt:
        """Classify text against the session and build the generation input."""
        session = await self._store.get(conversation_id)
        classification = classify(text, session, self._rules)

        prior_turns: list[Turn] = []
        if session and session.last_user_text and session.last_reply_text:
            prior_turns = [
                Turn(role="user", text=session.last_user_text),
                Turn(role="assistant", text=session.last_reply_text),
            ]

        logger.info(
            "Continuity resolved",
            extra={
                "context": {
                    "conversation_id": conversation_id,
                    "kind": classification.kind,
                    "has_prior_turn": bool(prior_turns),
                }
            },
        )

        return ResolvedPrompt(
            classification=classification,
            user_text=build_prompt(classification),
            prior_turns=prior_turns,
            epoch=self.epoch(conversation_id),
        )

    async def record(
        self,
        conversation_id: str,
        user_text: str,
        reply: str,
        epoch: Epoch | None = None,
    ) -> ConversationSession | None:
        """Write the exchange and any trailing follow-up question to the store."""
        if epoch is not None and epoch is not self._epochs.get(conversation_id):
            logger.info(
                "Skipping session update from before a reset",
                extra={"context": {"conversation_id": conversation_id}},
            )
            return None

        question = detect_followup(reply, self._rules.question_marks)
        return await self._store.set(
            conversation_id,
            last_user_text=user_text,
            last_reply_text=reply,
            pending_followup_question=question,
            awaiting_confirmation=question is not None,
        )

    async def reset(self, conversation_id: str) -> None:
        """Discard all continuity state for a conversation."""
        self._epochs.pop(conversation_id, None)
        await self._store.clear(conversation_id)

    async def reset_all(self) -> None:
        """Discard every conversation's continuity state."""
        self._epochs.clear()
        await self._store.clear_all()
