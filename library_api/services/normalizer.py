"""
Categories Field Normalization

Form-encoded book writes can carry the categories field in several
shapes: a JSON array string, a comma-separated string, a single id,
repeated form fields, or (for JSON bodies) a real list.
normalize_categories() turns all of them into a list of trimmed,
non-empty id strings.

The function never raises. Unparseable input degrades to an empty or
best-effort list; ids that do not resolve to real categories are
rejected later by the catalog store.

Examples:
    normalize_categories('["a", "b"]')  -> ["a", "b"]
    normalize_categories("a,b, c")      -> ["a", "b", "c"]
    normalize_categories("a")           -> ["a"]
    normalize_categories("")            -> []
"""

import json
from typing import Any


def _split_text(text: str) -> list[str]:
    if "," in text:
        return [part.strip() for part in text.split(",") if part.strip()]
    return [text] if text else []


def _parse_text(value: str) -> Any:
    text = value.strip()
    if text.startswith(("[", "{")):
        try:
            return json.loads(text)
        except ValueError:
            pass
    return _split_text(text)


def normalize_categories(value: Any) -> list[str]:
    """
    Normalize a raw categories value into a list of id strings.

    Args:
        value: None, a string, or a list/tuple as received from the request

    Returns:
        Trimmed, non-empty strings in their original order
    """
    if value is None:
        return []

    if isinstance(value, str):
        value = _parse_text(value)

    if not isinstance(value, (list, tuple)):
        return []

    return [
        item.strip()
        for item in value
        if isinstance(item, str) and item.strip()
    ]
