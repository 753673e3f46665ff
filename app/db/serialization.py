"""Storage-boundary helpers for ordered string lists.

Plan tasks, required resources, weekday whitelists and work order tasks and
used resources are stored in JSON columns as lists of strings. Rows written
before those columns held JSON may still carry plain newline-separated text;
decode_string_list accepts both.

Contract:
- clean: blank items dropped, items stripped, order kept; empty -> None
- decode: None -> []; list -> cleaned items; str -> legacy newline text
"""

from __future__ import annotations

from collections.abc import Iterable


def clean_string_list(items: Iterable[str] | None) -> list[str] | None:
    """Normalize a list before it is stored. Returns None when nothing remains."""
    if not items:
        return None
    cleaned = [str(item).strip() for item in items if item is not None and str(item).strip()]
    return cleaned or None


def decode_string_list(raw: list[str] | str | None) -> list[str]:
    """Read a stored string list.

    Args:
        raw: JSON column value, or legacy newline-separated text

    Returns:
        Ordered list of non-blank strings
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        return [line.strip() for line in raw.splitlines() if line.strip()]
    return clean_string_list(raw) or []
