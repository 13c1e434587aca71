"""Budget and team summaries derived from the roster."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from auction_tracker.models import AuctionState, Player


@dataclass(frozen=True)
class BudgetSummary:
    total_budget: float
    spent: float
    remaining: float
    bought_count: int

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0


@dataclass(frozen=True)
class TeamSummary:
    players: tuple[Player, ...]
    average_cost: int
    efficiency_percent: int


def bought_players(players: Sequence[Player]) -> list[Player]:
    return [player for player in players if player.status == "BoughtUs"]


def calculate_budget(players: Sequence[Player], total_budget: float) -> BudgetSummary:
    """Sum purchase prices; an over-budget (negative) remainder is allowed."""

    bought = bought_players(players)
    spent = sum(player.actual_price or 0.0 for player in bought)
    return BudgetSummary(
        total_budget=total_budget,
        spent=spent,
        remaining=total_budget - spent,
        bought_count=len(bought),
    )


def budget_for_state(state: AuctionState) -> BudgetSummary:
    return calculate_budget(state.players, state.total_budget)


def team_summary(players: Sequence[Player]) -> TeamSummary:
    bought = bought_players(players)
    spent = sum(player.actual_price or 0.0 for player in bought)
    planned = sum(player.preassigned_points for player in bought)
    average = round(spent / len(bought)) if bought else 0
    efficiency = round(planned / spent * 100) if bought and spent > 0 else 0
    return TeamSummary(players=tuple(bought), average_cost=average, efficiency_percent=efficiency)


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def recently_handled(players: Sequence[Player], *, limit: int = 5) -> list[Player]:
    handled = [player for player in players if player.status != "Available" and player.handled_at]
    handled.sort(key=lambda player: player.handled_at or _EPOCH, reverse=True)
    return handled[: max(0, limit)]
