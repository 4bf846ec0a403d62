"""TeamCity service-message escaping."""

from __future__ import annotations

from typing import Any

# Applied in order; the pipe must come first so pipes introduced by later
# replacements are not escaped again.
ESCAPES: tuple[tuple[str, str], ...] = (
    ("|", "||"),
    ("\n", "|n"),
    ("\r", "|r"),
    ("[", "|["),
    ("]", "|]"),
    ("\u0085", "|x"),  # next line
    ("\u2028", "|l"),  # line separator
    ("\u2029", "|p"),  # paragraph separator
    ("'", "|'"),
)

_UNESCAPES = {escaped[1]: raw for raw, escaped in ESCAPES}


def escape(value: Any) -> str:
    """Escape a value for use inside a service-message attribute.

    Args:
        value: Any value; it is converted with str() first

    Returns:
        Escaped text, or "" for None and the empty string
    """
    if value is None or value == "":
        return ""

    text = str(value)
    for raw, escaped in ESCAPES:
        text = text.replace(raw, escaped)
    return text


def unescape(text: str) -> str:
    """Reverse escape().

    Unknown escape sequences and a trailing lone pipe are kept as-is.
    """
    if not text:
        return ""

    out: list[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "|" and i + 1 < len(text) and text[i + 1] in _UNESCAPES:
            out.append(_UNESCAPES[text[i + 1]])
            i += 2
        else:
            out.append(char)
            i += 1
    return "".join(out)
