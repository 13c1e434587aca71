"""Filter and sort the roster for the player list view."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Literal, Sequence

from auction_tracker.models import PLAYER_STATUSES, Player, StatusFilter


SortKey = Literal["name", "points"]
SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class PlayerQuery:
    """Query configuration for the player list."""

    name_query: str = ""
    number_query: str = ""
    status: StatusFilter = "Available"
    sort_by: SortKey = "points"
    sort_order: SortOrder = "desc"


def _matches(player: Player, query: PlayerQuery) -> bool:
    name_query = query.name_query.strip().lower()
    if name_query and name_query not in player.name.lower():
        return False

    # Exact match so "1" never returns player 101.
    number_query = query.number_query.strip()
    if number_query and player.player_no != number_query:
        return False

    if query.status != "All" and player.status != query.status:
        return False
    return True


def _sort_key(player: Player, query: PlayerQuery) -> str | float:
    if query.sort_by == "name":
        return player.name.lower()
    return player.preassigned_points


def query_players(players: Sequence[Player], query: PlayerQuery | None = None) -> list[Player]:
    """Return the filtered, sorted view; the input sequence is left untouched."""

    query = query or PlayerQuery()
    selected = [player for player in players if _matches(player, query)]
    selected.sort(key=lambda player: _sort_key(player, query), reverse=query.sort_order == "desc")
    return selected


def status_counts(players: Sequence[Player]) -> dict[str, int]:
    counts = Counter(player.status for player in players)
    summary = {"All": len(players)}
    for status in PLAYER_STATUSES:
        summary[status] = counts.get(status, 0)
    return summary
