"""
aic - AI Commit

Commit message suggestions from staged git changes, picked interactively.
"""

__version__ = "1.0.0"

# Centralized commit types - single source of truth
# Used by: prompts/builder.py (system prompts), output (type colours)
COMMIT_TYPES = {
    'feat': 'A new feature or capability',
    'fix': 'A bug fix',
    'refactor': 'Code restructuring without behavior change',
    'docs': 'Documentation only changes',
    'chore': 'Maintenance tasks, dependencies, tooling',
    'test': 'Adding or updating tests',
    'perf': 'Performance improvement',
    'build': 'Build system or external dependency changes',
    'ci': 'CI/CD configuration changes',
    'style': 'Formatting, whitespace, no code change',
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())


class AicError(Exception):
    """Base class for every error the CLI reports to the user."""
    pass
