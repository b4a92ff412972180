"""Tests for data models."""

from convo.models import (
    AttemptOutcome,
    AttemptStatus,
    BoundYesNo,
    DeliveryReport,
    ExplicitContinue,
    Fresh,
    GenerationRequest,
    HandleOutcome,
    ImplicitShort,
    InboundEvent,
    Turn,
)


class TestInboundEvent:
    """Tests for InboundEvent."""

    def test_defaults(self):
        """Test that text is the default message type."""
        event = InboundEvent(conversation_id="c1", event_id="e1", text="hi")
        assert event.message_type == "text"
        assert event.received_at.tzinfo is not None


class TestGenerationRequest:
    """Tests for GenerationRequest."""

    def test_to_messages_without_history(self):
        request = GenerationRequest(system_prompt="s", user_text="hi", model_candidates=["m"])
        assert request.to_messages() == [{"role": "user", "content": "hi"}]

    def test_to_messages_with_history(self):
        request = GenerationRequest(
            system_prompt="s",
            user_text="more",
            model_candidates=["m"],
            prior_turns=[Turn("user", "q"), Turn("assistant", "a")],
        )
        assert [m["role"] for m in request.to_messages()] == ["user", "assistant", "user"]


class TestOutcomes:
    """Tests for result types."""

    def test_attempt_ok(self):
        assert AttemptOutcome("m", 1, AttemptStatus.OK, text="x").ok
        assert not AttemptOutcome("m", 1, AttemptStatus.TIMED_OUT).ok

    def test_delivery_report_complete(self):
        assert DeliveryReport(total=2, sent=2).complete
        assert not DeliveryReport(total=2, sent=1, failed=1).complete

    def test_handle_outcome_values(self):
        assert HandleOutcome.REPLIED.value == "replied"
        assert HandleOutcome("duplicate") is HandleOutcome.DUPLICATE


class TestClassificationKinds:
    """Tests for the classification variants."""

    def test_kinds(self):
        """Test that every variant carries a distinct kind tag."""
        kinds = {
            ExplicitContinue(previous_reply="r").kind,
            BoundYesNo(question="q", answer="a", affirmative=True).kind,
            ImplicitShort(text="t").kind,
            Fresh(text="t").kind,
        }
        assert kinds == {"explicit_continue", "bound_yes_no", "implicit_short", "fresh"}
