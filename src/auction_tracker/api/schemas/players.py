from __future__ import annotations

from pydantic import BaseModel

from auction_tracker.models import Player, PlayerStatus


class TransitionRequest(BaseModel):
    status: PlayerStatus
    price: float | None = None


class PlayerListResponse(BaseModel):
    players: list[Player]
    total: int
    counts: dict[str, int]
