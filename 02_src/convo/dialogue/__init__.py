"""Dialogue continuity module."""

from .classifier import ContinuityRules, build_prompt, classify, detect_followup
from .resolver import ContinuityResolver, IContinuityResolver

__all__ = [
    "ContinuityRules",
    "classify",
    "build_prompt",
    "detect_followup",
    "ContinuityResolver",
    "IContinuityResolver",
]
