"""Git Operations Package"""

from aic.git.analyzer import GitAnalyzer, GitError
from aic.git.gate import DiffGate, PreparedDiff, HARD_LIMIT, SUMMARY_INPUT_LIMIT, compose_user_content, first_n_chars

__all__ = [
    "GitAnalyzer",
    "GitError",
    "DiffGate",
    "PreparedDiff",
    "HARD_LIMIT",
    "SUMMARY_INPUT_LIMIT",
    "compose_user_content",
    "first_n_chars",
]
