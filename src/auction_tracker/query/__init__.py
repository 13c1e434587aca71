"""Roster query utilities (filtering, sorting, counts)."""

from .filtering import PlayerQuery, SortKey, SortOrder, query_players, status_counts

__all__ = [
    "PlayerQuery",
    "SortKey",
    "SortOrder",
    "query_players",
    "status_counts",
]
