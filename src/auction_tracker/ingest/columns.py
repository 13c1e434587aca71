"""Resolve arbitrary spreadsheet headers to canonical roster fields."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from auction_tracker.config.columns import CANONICAL_FIELDS, get_synonyms


def _header_token(value: object) -> str:
    return str(value).strip().lower()


def _synonyms_for(field: str, synonyms: Mapping[str, Sequence[str]] | None) -> Sequence[str]:
    if synonyms is not None and field in synonyms:
        return synonyms[field]
    return get_synonyms(field)


def find_header(
    headers: Iterable[object],
    field: str,
    *,
    synonyms: Mapping[str, Sequence[str]] | None = None,
) -> Optional[object]:
    """Return the first header matching ``field``'s synonyms in priority order."""

    by_token: dict[str, object] = {}
    for header in headers:
        by_token.setdefault(_header_token(header), header)
    for synonym in _synonyms_for(field, synonyms):
        match = by_token.get(_header_token(synonym))
        if match is not None:
            return match
    return None


def resolve_field(
    row: Mapping[Any, Any],
    field: str,
    *,
    synonyms: Mapping[str, Sequence[str]] | None = None,
) -> Any:
    """Return the row value for a canonical field, or ``None`` when no header matches."""

    header = find_header(row.keys(), field, synonyms=synonyms)
    if header is None:
        return None
    return row[header]


def match_columns(
    headers: Iterable[object],
    *,
    synonyms: Mapping[str, Sequence[str]] | None = None,
) -> dict[str, str]:
    """Map each recognised canonical field to the header it resolves to."""

    header_list = list(headers)
    matches: dict[str, str] = {}
    for field in CANONICAL_FIELDS:
        header = find_header(header_list, field, synonyms=synonyms)
        if header is not None:
            matches[field] = str(header)
    return matches
