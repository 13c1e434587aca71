"""Pydantic models for API I/O."""

from .imports import ImportConfirmResponse, ImportPreviewResponse
from .players import PlayerListResponse, TransitionRequest
from .session import BudgetResponse, SessionRequest, StateResponse, TeamResponse

__all__ = [
    "BudgetResponse",
    "ImportConfirmResponse",
    "ImportPreviewResponse",
    "PlayerListResponse",
    "SessionRequest",
    "StateResponse",
    "TeamResponse",
    "TransitionRequest",
]
