import re

_SEPARATORS = re.compile(r"[_-]")

def normalize_title(raw: str) -> str:
    """Turn ``user_login`` / ``manage-roles`` / ``  fix   BUG`` into Title Case."""
    words = _SEPARATORS.sub(" ", raw).split()
    return " ".join(w[:1].title() + w[1:].lower() for w in words)
