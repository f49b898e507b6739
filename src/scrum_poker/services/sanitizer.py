"""
HTML escaping for client-supplied text.

Every string that arrives over the socket (room names, display names,
avatars, votes, target ids) passes through ``sanitize`` exactly once before
it is stored or echoed to other participants.
"""

from typing import Any

# Order matters: '&' must be replaced first.
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def sanitize(value: Any) -> str:
    """
    Escape the five HTML metacharacters in ``value``.

    Args:
        value: Raw client value. ``None`` becomes an empty string and
            anything else is converted with ``str()``.

    Returns:
        The escaped text
    """
    if value is None:
        return ""
    text = str(value)
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text
