"""
Tests for the diff gate that keeps prompts within budget.

Run with:
    pytest tests/test_gate.py -v
"""

import pytest

from aic.git import HARD_LIMIT, SUMMARY_INPUT_LIMIT, DiffGate, compose_user_content, first_n_chars
from aic.llm import CompletionResult, LLMClient, TransportError
from aic.prompts.templates import SUMMARY_SYSTEM_PROMPT


class RecordingClient(LLMClient):
    """Returns a fixed summary, or raises, and records requests."""

    def __init__(self, summary="src/app.py: modify\nKey Impacts:\n- faster startup", error=None):
        self.summary = summary
        self.error = error
        self.requests = []

    @property
    def name(self):
        return "Recording"

    def chat(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return CompletionResult(choices=[self.summary], raw="")


class TestFirstNChars:

    def test_short_text_unchanged(self):
        assert first_n_chars("abc", 10) == "abc"

    def test_never_splits_characters(self):
        text = "日本語" * 20000
        cut = first_n_chars(text, SUMMARY_INPUT_LIMIT + 1)
        assert len(cut) == SUMMARY_INPUT_LIMIT + 1
        # Round-trips through UTF-8 without damage
        assert cut.encode("utf-8").decode("utf-8") == cut


class TestDiffGate:
    """DiffGate.prepare() below and above the limit."""

    def test_small_diff_passes_through(self):
        client = RecordingClient()
        diff = "x" * 1000
        prepared = DiffGate(client, "openai").prepare(diff)

        assert prepared.content == diff
        assert not prepared.truncated
        assert client.requests == []

    def test_exactly_at_limit_passes_through(self):
        client = RecordingClient()
        prepared = DiffGate(client, "openai").prepare("x" * HARD_LIMIT)
        assert prepared.content == "x" * HARD_LIMIT
        assert client.requests == []

    def test_large_diff_is_summarized_and_truncated(self):
        client = RecordingClient()
        diff = "a" * 20000
        prepared = DiffGate(client, "openai").prepare(diff)

        assert prepared.truncated
        assert prepared.shown_length == HARD_LIMIT
        assert prepared.content.startswith("DIFF SUMMARY (model-generated)\n")
        assert "[TRUNCATED: showing first 16000 of 20000 chars; omitted 4000]" in prepared.content
        assert "--- BEGIN TRUNCATED RAW DIFF ---\n" + "a" * HARD_LIMIT + "\n--- END TRUNCATED RAW DIFF ---" in prepared.content
        assert prepared.content.count("[TRUNCATED:") == 2

    def test_summary_uses_provider_default_model(self):
        client = RecordingClient()
        DiffGate(client, "claude").prepare("a" * 20000)

        request = client.requests[0]
        assert request.model == "claude-3-5-haiku-latest"
        assert request.system == SUMMARY_SYSTEM_PROMPT
        assert request.temperature == 0.2
        assert request.max_tokens == 384

    def test_summary_input_is_capped(self):
        client = RecordingClient()
        DiffGate(client, "openai").prepare("日" * (SUMMARY_INPUT_LIMIT + 1))

        user = client.requests[0].conversation[-1].content
        assert len(user) == SUMMARY_INPUT_LIMIT

    def test_summary_failure_falls_back_to_truncated_diff(self):
        client = RecordingClient(error=TransportError("offline"))
        prepared = DiffGate(client, "openai").prepare("b" * 20000)

        assert prepared.content == "b" * HARD_LIMIT
        assert prepared.summary == ""

    def test_blank_summary_counts_as_none(self):
        client = RecordingClient(summary="   ")
        prepared = DiffGate(client, "openai").prepare("c" * 20000)
        assert prepared.content == "c" * HARD_LIMIT


class TestComposeUserContent:

    def test_without_summary(self):
        assert compose_user_content("abcdef", "abc", "") == "abc"

    @pytest.mark.parametrize("original, truncated, note", [
        ("x" * 10, "x" * 4, "[TRUNCATED: showing first 4 of 10 chars; omitted 6]"),
        ("é" * 5, "é" * 5, "[TRUNCATED: showing first 5 of 5 chars; omitted 0]"),
    ])
    def test_note(self, original, truncated, note):
        content = compose_user_content(original, truncated, "summary")
        assert content.splitlines()[3] == note
        assert content.splitlines()[-1] == note
