"""Offline client returning canned suggestions (AIC_MOCK=1)"""

from aic.llm.base import CompletionResult, GenerationRequest, LLMClient
from aic.prompts.templates import COMBINE_INTRO, SUMMARY_SYSTEM_PROMPT

MOCK_SUGGESTIONS = [
    "feat: mock change",
    "fix: mock issue",
    "chore: update dependencies",
]

MOCK_COMBINED = [
    "refactor: combined mock suggestions",
    "chore: refine combined wording",
    "feat: consolidate scope across changes",
    "fix: address edge cases from combined",
]


class MockClient(LLMClient):
    """Deterministic stand-in used for demos and end-to-end tests."""

    def __init__(self):
        self.requests: list[GenerationRequest] = []

    @property
    def name(self) -> str:
        return "Mock"

    def chat(self, request: GenerationRequest) -> CompletionResult:
        self.requests.append(request)
        user = request.conversation[-1].content if request.conversation else ""

        if request.system == SUMMARY_SYSTEM_PROMPT:
            choices = ["mock summary of a large diff\nKey Impacts:\n- none"]
        elif user.startswith(COMBINE_INTRO):
            selected = [line for line in user[len(COMBINE_INTRO):].splitlines() if line.strip()]
            choices = ["; ".join(selected)] + MOCK_COMBINED
        else:
            choices = list(MOCK_SUGGESTIONS)

        return CompletionResult(choices=choices[:request.n], raw="")
