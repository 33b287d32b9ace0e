"""Suggestion Generator - staged diff in, cleaned commit message candidates out."""

import logging
import sys

from aic.git import DiffGate, GitAnalyzer, GitError
from aic.llm import EmptyResponseError, LLMClient
from aic.output import dim
from aic.prompts import GENERIC_INSTRUCTIONS, PromptBuilder
from aic.suggestions import clean_suggestions

logger = logging.getLogger(__name__)

COMBINE_EMPTY_MESSAGE = "empty suggestions after combining"


class SuggestionGenerator:
    """Runs generate, combine and analyze requests against one client."""

    def __init__(self, config, client: LLMClient, git: GitAnalyzer | None = None):
        self.config = config
        self.client = client
        self._git = git
        self.builder = PromptBuilder(config.system_addition)
        self.gate = DiffGate(client, config.provider, self.builder)

    @property
    def git(self) -> GitAnalyzer:
        if self._git is None:
            self._git = GitAnalyzer()
        return self._git

    def generate(self) -> list[str]:
        """Suggestions for the staged diff, at most config.suggestions of them."""
        if self.config.mock:
            # Canned answers; no repository needed
            user_content = ""
        else:
            diff = self.git.staged_diff()
            if not diff.strip():
                raise GitError("no staged changes")
            prepared = self.gate.prepare(diff)
            if prepared.summary and self.config.debug_summary:
                self._print_summary_debug(prepared)
            user_content = prepared.content

        request = self.builder.generate(self.config.model, user_content, self.config.suggestions)
        logger.debug("generate: model=%s n=%d prompt=%d chars", request.model, request.n, len(user_content))
        result = self.client.chat(request)
        return clean_suggestions(result, self.config.suggestions, debug=self.config.debug)

    def combine(self, selected: list[str]) -> list[str]:
        """Fuse several picked candidates into a fresh candidate list."""
        if len(selected) < 2:
            raise ValueError("combine needs at least two suggestions")

        request = self.builder.combine(self.config.model, selected, self.config.suggestions)
        logger.debug("combine: %d selected", len(selected))
        result = self.client.chat(request)
        return clean_suggestions(result, self.config.suggestions, debug=self.config.debug,
                                 empty_message=COMBINE_EMPTY_MESSAGE)

    def analyze(self, limit: int = 500) -> tuple[str, int]:
        """Infer a commit style instruction from history.

        Returns the instruction and how many subjects were sampled.
        """
        subjects = self.git.recent_subjects(limit)
        if not subjects:
            return GENERIC_INSTRUCTIONS, 0

        request = self.builder.analyze(self.config.model, subjects)
        result = self.client.chat(request)
        if not result.choices:
            raise EmptyResponseError("no choices returned", raw=result.raw)

        instructions = " ".join(result.choices[0].split())
        if not instructions:
            raise EmptyResponseError("empty instructions", raw=result.raw)
        return instructions, len(subjects)

    @staticmethod
    def _print_summary_debug(prepared) -> None:
        print(dim(f"[debug] diff summarized (orig={prepared.original_length} chars, "
                  f"shown={prepared.shown_length})"), file=sys.stderr)
        print("===== DIFF SUMMARY DEBUG START =====", file=sys.stderr)
        print(prepared.summary, file=sys.stderr)
        print("===== DIFF SUMMARY DEBUG END =====", file=sys.stderr)
