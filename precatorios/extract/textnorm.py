import re

ELLIPSIS = "..."

_RE_ANY_SPACE = re.compile(r"\s+", flags=re.UNICODE)


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run (newlines, NBSP, tabs) to one space and trim."""
    if not text:
        return ""
    return _RE_ANY_SPACE.sub(" ", text).strip()


def truncate(text: str, max_chars: int) -> str:
    # hard cut, marker appended only when something was dropped
    if len(text) > max_chars:
        return text[:max_chars] + ELLIPSIS
    return text
