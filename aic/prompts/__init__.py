"""Prompt Construction Package"""

from aic.prompts.builder import PromptBuilder, PromptConfig
from aic.prompts.templates import GENERIC_INSTRUCTIONS

__all__ = [
    "PromptBuilder",
    "PromptConfig",
    "GENERIC_INSTRUCTIONS",
]
