"""LLM module."""

from .extraction import extract_text
from .invoker import GenerationExhausted, GenerationInvoker, IGenerationInvoker
from .llm_provider import (
    AnthropicProvider,
    ILLMProvider,
    OpenAIResponsesProvider,
    create_provider,
)

__all__ = [
    "ILLMProvider",
    "OpenAIResponsesProvider",
    "AnthropicProvider",
    "create_provider",
    "extract_text",
    "IGenerationInvoker",
    "GenerationInvoker",
    "GenerationExhausted",
]
