"""Pydantic models for auction state."""

from .player import (
    PLAYER_STATUSES,
    UNKNOWN_PLAYER_NAME,
    AuctionState,
    ImportIssue,
    ImportPreview,
    Player,
    PlayerStatus,
    StatusFilter,
)

__all__ = [
    "PLAYER_STATUSES",
    "UNKNOWN_PLAYER_NAME",
    "AuctionState",
    "ImportIssue",
    "ImportPreview",
    "Player",
    "PlayerStatus",
    "StatusFilter",
]
