"""Follow-up classification and prompt rewriting."""

import re
from dataclasses import dataclass

from ..models import (
    BoundYesNo,
    Classification,
    ConversationSession,
    ExplicitContinue,
    Fresh,
    ImplicitShort,
)
from .language import CONTINUATION_CUES, NO_TOKENS, YES_TOKENS, normalize_token

# Declarative sentence boundaries inside one line.
_SENTENCE_BREAK_RE = re.compile(r"(?<=[.!。])\s+")


@dataclass(frozen=True)
class ContinuityRules:
    """Thresholds and vocabularies for continuity classification."""

    short_message_max_chars: int = 12
    question_marks: str = "?؟"
    continuation_cues: frozenset[str] = CONTINUATION_CUES
    yes_tokens: frozenset[str] = YES_TOKENS
    no_tokens: frozenset[str] = NO_TOKENS


def classify(
    text: str,
    session: ConversationSession | None,
    rules: ContinuityRules | None = None,
) -> Classification:
    """Classify an inbound message against prior session state.

    Precedence, first match wins:
    explicit continuation cue, yes/no bound to a pending follow-up question,
    short message after a prior reply, fresh turn.
    """
    rules = rules or ContinuityRules()
    stripped = text.strip()
    token = normalize_token(stripped)
    last_reply = session.last_reply_text if session else None
    pending = session.pending_followup_question if session else None

    if last_reply and token in rules.continuation_cues:
        return ExplicitContinue(previous_reply=last_reply)

    if pending and (token in rules.yes_tokens or token in rules.no_tokens):
        return BoundYesNo(
            question=pending,
            answer=stripped,
            affirmative=token in rules.yes_tokens,
        )

    if last_reply and len(stripped) <= rules.short_message_max_chars:
        return ImplicitShort(text=stripped)

    return Fresh(text=text)


def build_prompt(classification: Classification) -> str:
    """Text to send to generation for a classified message."""
    if isinstance(classification, ExplicitContinue):
        return (
            "Continue your previous answer from exactly where it stopped. "
            "Do not repeat anything that was already said.\n\n"
            f"Previous answer:\n{classification.previous_reply}"
        )

    if isinstance(classification, BoundYesNo):
        return (
            f'Earlier you asked: "{classification.question}"\n'
            f'The user answered: "{classification.answer}"\n'
            "Proceed using this answer. Do not ask the same question again."
        )

    if isinstance(classification, ImplicitShort):
        return (
            "The user's short message continues the previous exchange; "
            "answer it in that context rather than as a new topic.\n\n"
            f"User message: {classification.text}"
        )

    return classification.text


def detect_followup(reply: str, question_marks: str = "?؟") -> str | None:
    """Return the trailing question of a reply, if its last line asks one.

    The last non-empty line is the candidate. Leading declarative
    sentences on that line are dropped so "Step A. Need the batch size?"
    records only the question.
    """
    lines = [line.strip() for line in (reply or "").splitlines() if line.strip()]
    if not lines:
        return None

    last_line = lines[-1]
    if not question_marks or last_line[-1] not in question_marks:
        return None

    return _SENTENCE_BREAK_RE.split(last_line)[-1].strip()
