"""Prompt Builder - Construct provider-neutral requests for each generation step."""

from dataclasses import dataclass

from aic.llm.base import GenerationRequest, Message
from aic.prompts.templates import (
    ANALYZE_INTRO,
    ANALYZE_SYSTEM_PROMPT,
    COMBINE_INTRO,
    COMBINE_SYSTEM_PROMPT,
    GENERATE_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    USER_INSTRUCTIONS_PREFIX,
)


@dataclass
class PromptConfig:
    """Sampling settings per request kind."""
    max_tokens: int = 256
    temperature: float = 0.25


GENERATE = PromptConfig(max_tokens=256, temperature=0.25)
COMBINE = PromptConfig(max_tokens=256, temperature=0.4)
SUMMARIZE = PromptConfig(max_tokens=384, temperature=0.2)
ANALYZE = PromptConfig(max_tokens=280, temperature=0.3)


class PromptBuilder:
    """Builds the GenerationRequest for each step of the flow."""

    def __init__(self, system_addition: str = ""):
        self.system_addition = system_addition.strip()

    def generate(self, model: str, user_content: str, count: int) -> GenerationRequest:
        system = self._with_addition(GENERATE_SYSTEM_PROMPT.format(count=count))
        return self._request(model, system, user_content, count, GENERATE)

    def combine(self, model: str, selected: list[str], count: int) -> GenerationRequest:
        user_content = COMBINE_INTRO + "\n".join(selected)
        return self._request(model, self._with_addition(COMBINE_SYSTEM_PROMPT), user_content, count, COMBINE)

    def summarize(self, model: str, diff: str) -> GenerationRequest:
        # Summaries ignore user instructions; they describe the diff, not the commit
        return self._request(model, SUMMARY_SYSTEM_PROMPT, diff, 1, SUMMARIZE)

    def analyze(self, model: str, subjects: list[str]) -> GenerationRequest:
        user_content = ANALYZE_INTRO + "\n".join(subjects)
        return self._request(model, ANALYZE_SYSTEM_PROMPT, user_content, 1, ANALYZE)

    def _with_addition(self, system: str) -> str:
        if not self.system_addition:
            return system
        return system + USER_INSTRUCTIONS_PREFIX + self.system_addition

    @staticmethod
    def _request(model: str, system: str, user: str, count: int, settings: PromptConfig) -> GenerationRequest:
        return GenerationRequest(
            model=model,
            messages=(Message("system", system), Message("user", user)),
            max_tokens=settings.max_tokens,
            n=count,
            temperature=settings.temperature,
        )
