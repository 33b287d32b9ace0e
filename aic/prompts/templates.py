"""Prompt text shared by the builder and the mock client."""

from aic import COMMIT_TYPE_NAMES

TYPES_ALTERNATION = "|".join(COMMIT_TYPE_NAMES)

GENERATE_SYSTEM_PROMPT = (
    "You generate single-line Conventional Commit messages. "
    "Rules: one line per message (<=72 chars), imperative mood, no trailing period; "
    f"start with a type ({TYPES_ALTERNATION}) and optional scope; "
    "do NOT mention the diff/user/files or explain. No numbering, bullets, quotes, emojis, or reasoning. "
    "Output: return ONLY the messages, one per choice. "
    "Produce exactly {count} distinct options prioritizing the most impactful changes."
)

COMBINE_SYSTEM_PROMPT = (
    "You are a helpful assistant that synthesizes multiple draft commit messages into improved "
    "conventional commit suggestions. Given several commit messages that may overlap, produce distinct, "
    "concise, high-quality alternatives (max 30 tokens each). No line breaks; return ONLY the commit "
    "messages, one per choice, with no numbering or bullets."
)

COMBINE_INTRO = "Combine and refine these commit messages into consolidated alternatives:\n\n"

SUMMARY_SYSTEM_PROMPT = (
    "You summarize git diffs. Produce a concise overview: list each file (max 1 line) with nature of "
    "change (add/remove/modify/rename) and highlight any: API signature changes, new public functions, "
    "deleted functions, dependency/version changes, security related changes, configuration changes. "
    "After the list, include a short 'Key Impacts:' section (<=3 bullet lines). "
    "No commit messages, no speculation."
)

ANALYZE_SYSTEM_PROMPT = (
    "You analyze Git commit history and produce a concise, prescriptive style guide for future commit "
    f"messages. Infer conventions actually used (types like {TYPES_ALTERNATION}; whether scope is used; "
    "whether subjects end with a period; imperative mood; <=72 char subject). "
    "Output only the final instruction text suitable for a config file; do not include examples, lists, "
    "or the analyzed messages."
)

ANALYZE_INTRO = "Recent commit subjects (one per line):\n"

# Used by analyze when the repository has no history yet
GENERIC_INSTRUCTIONS = (
    f"Use Conventional Commits ({TYPES_ALTERNATION}). "
    "Imperative mood, subject <=72 chars, scope optional, no trailing period."
)

USER_INSTRUCTIONS_PREFIX = " Additional user instructions: "
