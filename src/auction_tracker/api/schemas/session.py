from __future__ import annotations

from pydantic import BaseModel, Field

from auction_tracker.models import AuctionState, Player


class SessionRequest(BaseModel):
    team_name: str
    budget: float


class BudgetResponse(BaseModel):
    total_budget: float
    spent: float
    remaining: float
    bought_count: int
    is_over_budget: bool


class StateResponse(BaseModel):
    state: AuctionState
    budget: BudgetResponse


class TeamResponse(BaseModel):
    players: list[Player]
    average_cost: int
    efficiency_percent: int
    recently_handled: list[Player] = Field(default_factory=list)
