"""Validate roster rows and assemble import previews."""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple
from uuid import uuid4

from auction_tracker.ingest.columns import resolve_field
from auction_tracker.models import UNKNOWN_PLAYER_NAME, ImportIssue, ImportPreview, Player


logger = logging.getLogger(__name__)

MISSING_NAME_MESSAGE = "Missing player name"
INVALID_POINTS_MESSAGE = "Missing or invalid points"

_TEXT_FIELDS = ("parish_name", "role", "priority", "reasons", "notes")


def new_player_id() -> str:
    return f"p-{uuid4().hex}"


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        # Spreadsheet numerics such as player numbers arrive as 12.0.
        text = str(int(value))
    else:
        text = str(value).strip()
    return text or None


def parse_points(value: Any) -> Optional[float]:
    """Coerce a points cell to a non-negative float, or ``None`` when invalid."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def normalize_name(name: str) -> str:
    return name.strip().lower()


def validate_row(
    row: Mapping[Any, Any] | None,
    row_number: int,
    *,
    synonyms: Mapping[str, Sequence[str]] | None = None,
    id_factory: Callable[[], str] = new_player_id,
) -> Tuple[Optional[Player], List[ImportIssue]]:
    """Normalize one raw row into a candidate player plus any issues.

    Rows without any recognised content are skipped silently and return
    ``(None, [])``.
    """

    if not row:
        return None, []

    name = _clean_text(resolve_field(row, "name", synonyms=synonyms))
    raw_points = resolve_field(row, "preassigned_points", synonyms=synonyms)
    points = parse_points(raw_points)
    player_no = _clean_text(resolve_field(row, "player_no", synonyms=synonyms))
    text_values = {
        field: _clean_text(resolve_field(row, field, synonyms=synonyms)) for field in _TEXT_FIELDS
    }

    has_other_content = (
        player_no is not None
        or _clean_text(raw_points) is not None
        or any(value is not None for value in text_values.values())
    )
    if name is None and points is None and not has_other_content:
        return None, []

    issues: List[ImportIssue] = []
    if name is None:
        issues.append(ImportIssue(row=row_number, field="name", message=MISSING_NAME_MESSAGE, type="error"))
    if points is None:
        issues.append(ImportIssue(row=row_number, field="points", message=INVALID_POINTS_MESSAGE, type="error"))

    candidate = Player(
        id=id_factory(),
        player_no=player_no,
        name=name or UNKNOWN_PLAYER_NAME,
        preassigned_points=points if points is not None else 0.0,
        status="Available",
        **text_values,
    )
    return candidate, issues


def build_import_preview(
    rows: Iterable[Mapping[Any, Any] | None],
    existing_players: Sequence[Player] = (),
    *,
    synonyms: Mapping[str, Sequence[str]] | None = None,
    id_factory: Callable[[], str] = new_player_id,
) -> ImportPreview:
    """Run row validation over a batch and flag duplicate names.

    Duplicates against the batch itself or the existing roster are
    warnings only; every candidate stays in the preview.
    """

    existing_names = {normalize_name(player.name) for player in existing_players}
    seen_names: set[str] = set()
    players: List[Player] = []
    issues: List[ImportIssue] = []
    total_rows = 0

    for row_number, row in enumerate(rows, start=1):
        total_rows = row_number
        candidate, row_issues = validate_row(row, row_number, synonyms=synonyms, id_factory=id_factory)
        issues.extend(row_issues)
        if candidate is None:
            continue
        if not any(issue.field == "name" and issue.type == "error" for issue in row_issues):
            key = normalize_name(candidate.name)
            if key in seen_names or key in existing_names:
                issues.append(
                    ImportIssue(
                        row=row_number,
                        field="name",
                        message=f"Duplicate name: {candidate.name}",
                        type="warning",
                    )
                )
            seen_names.add(key)
        players.append(candidate)

    preview = ImportPreview(players=players, issues=issues)
    logger.info(
        "Import preview: %s rows, %s candidates, %s errors, %s warnings",
        total_rows,
        len(preview.players),
        len(preview.errors),
        len(preview.warnings),
    )
    return preview
