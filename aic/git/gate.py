"""Diff gate - keep oversized diffs within the prompt budget."""

import logging
from dataclasses import dataclass

from aic.llm import LLMClient, LLMError, default_model_for
from aic.prompts import PromptBuilder

logger = logging.getLogger(__name__)

# Raw diff characters embedded directly in a prompt
HARD_LIMIT = 16000

# Raw diff characters the summary request may read
SUMMARY_INPUT_LIMIT = 48000

CHUNK_BEGIN = "--- BEGIN TRUNCATED RAW DIFF ---"
CHUNK_END = "--- END TRUNCATED RAW DIFF ---"
SUMMARY_HEADER = "DIFF SUMMARY (model-generated)"


def first_n_chars(text: str, n: int) -> str:
    """At most n characters of text.

    str indexes by code point, so a cut never lands inside a multi-byte
    character.
    """
    return text[:n]


def compose_user_content(original: str, truncated: str, summary: str) -> str:
    """Final user prompt: the truncated diff, wrapped with the summary when one exists."""
    if not summary:
        return truncated

    omitted = max(len(original) - len(truncated), 0)
    cutoff_note = f"[TRUNCATED: showing first {len(truncated)} of {len(original)} chars; omitted {omitted}]"
    return "\n".join([
        SUMMARY_HEADER,
        summary,
        "",
        cutoff_note,
        CHUNK_BEGIN,
        truncated,
        CHUNK_END,
        cutoff_note,
    ])


@dataclass
class PreparedDiff:
    """Prompt-ready diff plus what the gate did to it."""
    content: str
    original_length: int
    shown_length: int
    summary: str = ""

    @property
    def truncated(self) -> bool:
        return self.shown_length < self.original_length


class DiffGate:
    """Passes small diffs through; summarizes and truncates large ones.

    Summaries always use the provider family's default model, whatever model
    the user configured for generation.
    """

    def __init__(self, client: LLMClient, provider: str, builder: PromptBuilder | None = None,
                 hard_limit: int = HARD_LIMIT):
        self.client = client
        self.provider = provider
        self.builder = builder or PromptBuilder()
        self.hard_limit = hard_limit

    def prepare(self, diff: str) -> PreparedDiff:
        if len(diff) <= self.hard_limit:
            return PreparedDiff(content=diff, original_length=len(diff), shown_length=len(diff))

        summary = self.summarize(diff)
        truncated = first_n_chars(diff, self.hard_limit)
        logger.debug("diff gated: orig=%d chars, shown=%d, summary=%s",
                     len(diff), len(truncated), bool(summary))
        return PreparedDiff(
            content=compose_user_content(diff, truncated, summary),
            original_length=len(diff),
            shown_length=len(truncated),
            summary=summary,
        )

    def summarize(self, diff: str) -> str:
        """Compact structured summary, or "" when the provider cannot give one."""
        request = self.builder.summarize(
            default_model_for(self.provider),
            first_n_chars(diff, SUMMARY_INPUT_LIMIT),
        )
        try:
            result = self.client.chat(request)
        except LLMError as e:
            logger.debug("diff summary failed, using truncated diff only: %s", e)
            return ""
        if not result.choices:
            return ""
        return result.choices[0].strip()
