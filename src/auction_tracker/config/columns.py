"""Column synonym table for roster spreadsheets."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Sequence, Tuple


# Ordered by priority: the first synonym present in a row wins.
_COLUMN_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "player_no": ("player no", "no", "sr no", "id", "p_no"),
    "name": ("player name", "name", "player", "p_name"),
    "parish_name": ("parish name", "parish", "team", "club"),
    "preassigned_points": ("points", "planned points", "base price", "preassigned points", "value"),
    "role": ("role", "position", "type"),
    "priority": ("priority", "tier"),
    "reasons": ("reasons", "reason", "remarks"),
    "notes": ("notes", "comments", "info"),
}

CANONICAL_FIELDS: Tuple[str, ...] = tuple(_COLUMN_SYNONYMS)

ROLE_OPTIONS: Tuple[str, ...] = ("Batsman", "Bowler", "All-rounder", "Wicket-keeper")
PRIORITY_OPTIONS: Tuple[str, ...] = ("High", "Medium", "Low")


def iter_fields() -> Iterable[str]:
    """Return an iterator over canonical field names in table order."""

    return iter(CANONICAL_FIELDS)


def get_synonyms(field: str) -> Tuple[str, ...]:
    """Fetch the synonyms for a canonical field, raising KeyError if missing."""

    if field not in _COLUMN_SYNONYMS:
        raise KeyError(f"No column synonyms configured for field={field!r}")
    return _COLUMN_SYNONYMS[field]


def build_synonym_table(
    extra: Mapping[str, Sequence[str]] | None = None,
) -> Dict[str, Tuple[str, ...]]:
    """Return the synonym table with ``extra`` synonyms appended per field.

    Built-in synonyms keep their priority; extras only ever add headers.
    """

    table = dict(_COLUMN_SYNONYMS)
    for field, synonyms in (extra or {}).items():
        existing = get_synonyms(field)
        seen = {synonym.strip().lower() for synonym in existing}
        appended = list(existing)
        for synonym in synonyms:
            key = synonym.strip().lower()
            if key and key not in seen:
                appended.append(synonym)
                seen.add(key)
        table[field] = tuple(appended)
    return table


# Read-only view for callers that want the whole table.
COLUMN_SYNONYMS: Mapping[str, Tuple[str, ...]] = dict(_COLUMN_SYNONYMS)
