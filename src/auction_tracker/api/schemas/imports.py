from __future__ import annotations

from pydantic import BaseModel, Field

from auction_tracker.models import ImportIssue, Player


class ImportPreviewResponse(BaseModel):
    preview_id: str
    filename: str
    players: list[Player]
    issues: list[ImportIssue]
    error_count: int
    warning_count: int
    can_confirm: bool
    matched_columns: dict[str, str] = Field(default_factory=dict)


class ImportConfirmResponse(BaseModel):
    imported: int
    roster_size: int
