"""Suggestion cleanup - turn raw provider choices into single-line candidates."""

from aic.llm.base import CompletionResult, EmptyResponseError

# A leading token ends at the first of these characters
MARKER_STOPS = ".:)]> \t-"
BULLETS = "-*+"
MAX_MARKER_LENGTH = 4


def is_list_marker(token: str) -> bool:
    """True for short numeric markers such as '1.', '2)', '(3)', '4:' or '5-'."""
    token = token.strip()
    if not token or len(token) > MAX_MARKER_LENGTH:
        return False
    if not any(ch.isdigit() for ch in token):
        return False
    return any(ch in ".:)])" for ch in token) or token.endswith((":", "-"))


def strip_list_marker(line: str) -> str:
    """Remove leading numbering or bullets from a line.

    Markers are removed until none is left, so stripping is idempotent. A line
    made only of markers is returned unchanged.
    """
    original = line
    s = line.lstrip(" ")
    while s:
        idx = next((i for i, ch in enumerate(s) if ch in MARKER_STOPS), -1)
        if idx != -1 and is_list_marker(s[:idx + 1]):
            s = s[idx + 1:].strip()
            continue
        if s[0] in BULLETS:
            s = s[1:].strip()
            continue
        break
    if not s:
        return original
    return s


def split_choice(choice: str) -> list[str]:
    """A choice that ignored the one-line rule yields one candidate per line."""
    choice = choice.strip()
    if not choice:
        return []
    return [line.strip() for line in choice.split("\n") if line.strip()]


def clean_suggestions(result: CompletionResult, limit: int, debug: bool = False,
                      empty_message: str = "empty suggestions") -> list[str]:
    """Clean a result into at most `limit` candidates.

    Raises EmptyResponseError when the provider sent no choices or nothing
    survives cleaning. With debug, the raw body is appended to the message.
    """
    if not result.choices:
        raise EmptyResponseError("no choices returned", raw=result.raw)

    suggestions = []
    for choice in result.choices:
        for line in split_choice(choice):
            line = strip_list_marker(line)
            if line:
                suggestions.append(line)

    if not suggestions:
        message = empty_message
        if debug and result.raw:
            message = f"{message}\n\nRaw Response:\n{result.raw}"
        raise EmptyResponseError(message, raw=result.raw)

    return suggestions[:limit]
