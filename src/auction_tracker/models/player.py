"""Canonical auction models shared across ingestion, store and export layers."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


PlayerStatus = Literal["Available", "SoldOther", "BoughtUs"]
StatusFilter = Literal["All", "Available", "SoldOther", "BoughtUs"]

PLAYER_STATUSES: tuple[PlayerStatus, ...] = ("Available", "SoldOther", "BoughtUs")

UNKNOWN_PLAYER_NAME = "Unknown Player"


class Player(BaseModel):
    """One auction candidate.

    ``actual_price`` is set only while the player is ``BoughtUs`` and
    ``handled_at`` only while the player is not ``Available``.
    """

    id: str = Field(..., min_length=1)
    player_no: Optional[str] = None
    name: str = Field(..., min_length=1)
    parish_name: Optional[str] = None
    preassigned_points: float = Field(default=0.0, ge=0.0)
    status: PlayerStatus = "Available"
    actual_price: Optional[float] = None
    role: Optional[str] = None
    priority: Optional[str] = None
    reasons: Optional[str] = None
    notes: Optional[str] = None
    handled_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_status_fields(self) -> "Player":
        if (self.actual_price is not None) != (self.status == "BoughtUs"):
            raise ValueError("actual_price must be set if and only if status is BoughtUs")
        if (self.handled_at is not None) != (self.status != "Available"):
            raise ValueError("handled_at must be set if and only if status is not Available")
        return self


class AuctionState(BaseModel):
    """Aggregate root for one auction session."""

    team_name: str = ""
    total_budget: float = 0.0
    players: List[Player] = Field(default_factory=list)
    is_started: bool = False

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "AuctionState":
        seen: set[str] = set()
        for player in self.players:
            if player.id in seen:
                raise ValueError(f"duplicate player id {player.id!r}")
            seen.add(player.id)
        return self


class ImportIssue(BaseModel):
    """A single advisory finding raised while validating an import batch."""

    row: int = Field(..., ge=1)
    field: str
    message: str
    type: Literal["error", "warning"]

    model_config = ConfigDict(frozen=True)


class ImportPreview(BaseModel):
    """Candidate players plus issues awaiting a confirm/cancel decision."""

    players: List[Player] = Field(default_factory=list)
    issues: List[ImportIssue] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def errors(self) -> list[ImportIssue]:
        return [issue for issue in self.issues if issue.type == "error"]

    @property
    def warnings(self) -> list[ImportIssue]:
        return [issue for issue in self.issues if issue.type == "warning"]

    @property
    def can_confirm(self) -> bool:
        return not self.errors

    @property
    def is_empty(self) -> bool:
        # Nothing matched any canonical column.
        return not self.players and not self.issues
