"""Continuity classification data models."""

from dataclasses import dataclass, field
from typing import Union

from .generation import Turn


@dataclass(frozen=True)
class ExplicitContinue:
    """User asked to continue the previous reply."""

    previous_reply: str
    kind: str = field(default="explicit_continue", init=False)


@dataclass(frozen=True)
class BoundYesNo:
    """User answered the follow-up question the backend asked last."""

    question: str
    answer: str
    affirmative: bool
    kind: str = field(default="bound_yes_no", init=False)


@dataclass(frozen=True)
class ImplicitShort:
    """Short message treated as a continuation of the prior exchange."""

    text: str
    kind: str = field(default="implicit_short", init=False)


@dataclass(frozen=True)
class Fresh:
    """New turn, sent unchanged."""

    text: str
    kind: str = field(default="fresh", init=False)


Classification = Union[ExplicitContinue, BoundYesNo, ImplicitShort, Fresh]


class Epoch:
    """Identity token for one conversation between resets; compared with `is`."""

    __slots__ = ("__weakref__",)


@dataclass
class ResolvedPrompt:
    """What actually goes to generation for one inbound message."""

    classification: Classification
    user_text: str
    prior_turns: list[Turn] = field(default_factory=list)
    epoch: Epoch | None = None
