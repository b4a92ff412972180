"""Tests for GenerationInvoker."""

import asyncio

import pytest

from convo.llm import GenerationExhausted, GenerationInvoker
from convo.models import AttemptStatus, GenerationRequest, Turn


@pytest.fixture
def request_():
    """Two-candidate generation request."""
    return GenerationRequest(
        system_prompt="sys",
        user_text="hi",
        model_candidates=["model-a", "model-b"],
        timeout_ms=1000,
    )


def called_models(mock_llm) -> list[str]:
    return [call.kwargs["model"] for call in mock_llm.generate.await_args_list]


class TestGenerationInvoker:
    """Tests for ordered fallback."""

    async def test_first_success(self, invoker, mock_llm, request_):
        """Test that the first good reply is returned after one call."""
        reply = await invoker.invoke(request_)

        assert reply == "Test response"
        mock_llm.generate.assert_awaited_once_with(
            model="model-a",
            messages=[{"role": "user", "content": "hi"}],
            system="sys",
            max_output_tokens=500,
        )

    async def test_prior_turns_precede_user_text(self, invoker, mock_llm):
        """Test that context turns are sent before the new message."""
        request = GenerationRequest(
            system_prompt="sys",
            user_text="more",
            model_candidates=["model-a"],
            prior_turns=[Turn("user", "q1"), Turn("assistant", "a1")],
        )
        await invoker.invoke(request)

        assert mock_llm.generate.await_args.kwargs["messages"] == [
            {"role": "user", "content": "q1"},
            {"role": "assistant", "content": "a1"},
            {"role": "user", "content": "more"},
        ]

    async def test_retry_then_fallback(self, invoker, mock_llm, request_):
        """Test two tries per model before moving to the next candidate."""
        mock_llm.generate.side_effect = [
            RuntimeError("boom"),
            RuntimeError("boom"),
            {"output_text": "from b"},
        ]

        assert await invoker.invoke(request_) == "from b"
        assert called_models(mock_llm) == ["model-a", "model-a", "model-b"]

    async def test_empty_response_is_a_failure(self, invoker, mock_llm, request_):
        """Test that a blank reply counts as a failed attempt."""
        mock_llm.generate.side_effect = [{"output_text": "  "}, {"output_text": "ok"}]

        assert await invoker.invoke(request_) == "ok"
        assert mock_llm.generate.await_count == 2

    async def test_nested_response_shape(self, invoker, mock_llm, request_):
        """Test that text is extracted from nested output items."""
        mock_llm.generate.return_value = {
            "output": [{"content": [{"type": "output_text", "text": "nested"}]}]
        }
        assert await invoker.invoke(request_) == "nested"

    async def test_timeout(self, mock_llm):
        """Test that a slow call is abandoned at the deadline."""

        async def slow(**kwargs):
            await asyncio.sleep(5)
            return {"output_text": "late"}

        mock_llm.generate.side_effect = slow
        invoker = GenerationInvoker(mock_llm, attempts_per_model=1)
        request = GenerationRequest(
            system_prompt="sys", user_text="hi", model_candidates=["model-a"], timeout_ms=10
        )

        with pytest.raises(GenerationExhausted) as exc_info:
            await invoker.invoke(request)

        assert exc_info.value.attempts[0].status is AttemptStatus.TIMED_OUT

    async def test_exhausted(self, invoker, mock_llm, request_):
        """Test that every candidate failing raises with the full attempt log."""
        mock_llm.generate.side_effect = RuntimeError("boom")

        with pytest.raises(GenerationExhausted) as exc_info:
            await invoker.invoke(request_)

        error = exc_info.value
        assert error.attempt_count == 4
        assert error.models == ["model-a", "model-b"]
        assert all(a.status is AttemptStatus.FAILED for a in error.attempts)
        assert error.attempts[0].cause == "boom"

    async def test_no_candidates(self, invoker, mock_llm):
        """Test that an empty candidate list fails without calling the backend."""
        request = GenerationRequest(system_prompt="sys", user_text="hi", model_candidates=[])

        with pytest.raises(GenerationExhausted):
            await invoker.invoke(request)
        mock_llm.generate.assert_not_awaited()

    async def test_attempts_per_model_configurable(self, mock_llm, request_):
        """Test a single attempt per model."""
        mock_llm.generate.side_effect = RuntimeError("boom")
        invoker = GenerationInvoker(mock_llm, attempts_per_model=1)

        with pytest.raises(GenerationExhausted) as exc_info:
            await invoker.invoke(request_)
        assert exc_info.value.attempt_count == 2
