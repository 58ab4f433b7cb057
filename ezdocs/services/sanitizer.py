"""Markup stripping for inbound request data."""

import html
from typing import Any

from bs4 import BeautifulSoup

# Tags whose text content is dropped together with the tag itself
NON_TEXT_TAGS = ("script", "style", "textarea", "option", "noscript")


def sanitize_string(value: str) -> str:
    """
    Remove every tag and attribute from a string, then escape it.

    Args:
        value: Raw string from the request

    Returns:
        Plain text with &, <, >, " and ' entity-escaped
    """
    if "<" not in value and "&" not in value:
        return html.escape(value, quote=True)

    soup = BeautifulSoup(value, "html.parser")
    for tag in soup.find_all(NON_TEXT_TAGS):
        tag.decompose()

    return html.escape(soup.get_text(), quote=True)


def sanitize_value(value: Any) -> Any:
    """Recursively sanitize every string leaf of a JSON-compatible value."""
    if isinstance(value, str):
        return sanitize_string(value)
    if isinstance(value, dict):
        return {key: sanitize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_value(item) for item in value]
    return value
