from __future__ import annotations

import re
from typing import Any

_WHITESPACE = re.compile(r"\s")


def safe_to_string(value: Any) -> str:
    """Stringify and trim; ``None`` becomes an empty string."""
    if value is None:
        return ""
    return str(value).strip()


def encode_html(value: Any) -> str:
    return (
        safe_to_string(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def default_comparer(a: Any, b: Any) -> bool:
    # str.lower() is not locale aware; good enough for tag identity
    return safe_to_string(a).lower() == safe_to_string(b).lower()


def replace_spaces_with_dashes(value: Any) -> str:
    return _WHITESPACE.sub("-", safe_to_string(value))


def safe_highlight(text: Any, query: Any) -> str:
    """HTML-escape ``text`` and wrap case-insensitive matches of ``query`` in <em>.

    Entities produced by escaping are matched first so a query never splits
    one of them.
    """
    if not query:
        return text

    escaped = encode_html(text)
    needle = encode_html(query)
    expression = re.compile("&[^;]+;|" + re.escape(needle), re.IGNORECASE)

    def _wrap(match: re.Match[str]) -> str:
        found = match.group(0)
        return f"<em>{found}</em>" if found.lower() == needle.lower() else found

    return expression.sub(_wrap, escaped)
