"""CSS comment removal."""

from __future__ import annotations

__all__ = ["strip_comments"]


def strip_comments(css: str) -> str:
    """Remove every ``/* ... */`` comment, including multi-line ones.

    Each comment ends at the first ``*/`` after its opening ``/*``; an
    unterminated ``/*`` and everything after it is left alone. Comment bodies
    may contain braces that would otherwise be read as rule boundaries.
    Stripped comments are not restored. Quoted strings are not protected,
    so a literal ``/*`` inside a string starts a comment.
    """
    parts: list[str] = []
    pos = 0
    while True:
        start = css.find("/*", pos)
        if start == -1:
            break
        end = css.find("*/", start + 2)
        if end == -1:
            break
        parts.append(css[pos:start])
        pos = end + 2
    parts.append(css[pos:])
    return "".join(parts)
