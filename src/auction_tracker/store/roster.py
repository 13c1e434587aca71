"""Roster store owning the auction state and its transitions."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from auction_tracker.models import PLAYER_STATUSES, AuctionState, ImportPreview, Player, PlayerStatus


logger = logging.getLogger(__name__)

StateListener = Callable[[AuctionState], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class RosterStore:
    """Single owner of :class:`AuctionState`.

    Every mutation builds a new state and swaps it in whole, so readers
    holding :attr:`state` never see a partially applied change. Guard
    refusals return ``False`` rather than raising.
    """

    def __init__(
        self,
        state: AuctionState | None = None,
        *,
        on_change: StateListener | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._state = state or AuctionState()
        self._on_change = on_change
        self._clock = clock

    @property
    def state(self) -> AuctionState:
        return self._state

    @property
    def players(self) -> tuple[Player, ...]:
        return tuple(self._state.players)

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self._state.players:
            if player.id == player_id:
                return player
        return None

    def find_by_player_no(self, player_no: str) -> list[Player]:
        wanted = player_no.strip()
        if not wanted:
            return []
        return [player for player in self._state.players if player.player_no == wanted]

    def _replace(self, state: AuctionState) -> None:
        self._state = state
        if self._on_change is None:
            return
        try:
            self._on_change(state)
        except Exception:  # listener failures never undo an applied change
            logger.exception("State change listener failed")

    def start_session(self, team_name: str, budget: float) -> bool:
        team = (team_name or "").strip()
        if not team or not _is_finite_number(budget) or budget <= 0:
            logger.debug("Refusing to start session (team=%r, budget=%r)", team_name, budget)
            return False
        self._replace(
            self._state.model_copy(
                update={"team_name": team, "total_budget": float(budget), "is_started": True}
            )
        )
        logger.info("Session started for %s with budget %s", team, budget)
        return True

    def merge_imported_players(self, candidates: Iterable[Player]) -> int:
        """Append candidates in order; returns how many were added."""

        known_ids = {player.id for player in self._state.players}
        added: list[Player] = []
        for candidate in candidates:
            if candidate.id in known_ids:
                logger.warning("Skipping imported player %s: id already in roster", candidate.id)
                continue
            known_ids.add(candidate.id)
            added.append(candidate)
        if not added:
            return 0
        self._replace(self._state.model_copy(update={"players": [*self._state.players, *added]}))
        logger.info("Merged %s imported players (roster size %s)", len(added), len(self._state.players))
        return len(added)

    def confirm_import(self, preview: ImportPreview) -> bool:
        if not preview.can_confirm:
            logger.debug("Refusing import with %s blocking errors", len(preview.errors))
            return False
        self.merge_imported_players(preview.players)
        return True

    def transition(self, player_id: str, new_status: PlayerStatus, price: float | None = None) -> bool:
        if new_status not in PLAYER_STATUSES:
            logger.debug("Refusing transition to unknown status %r", new_status)
            return False
        players = list(self._state.players)
        index = next((idx for idx, player in enumerate(players) if player.id == player_id), None)
        if index is None:
            logger.debug("Refusing transition for unknown player %s", player_id)
            return False
        current = players[index]
        if (
            current.status != "Available"
            and new_status != "Available"
            and current.status != new_status
        ):
            # SoldOther and BoughtUs only connect through Available.
            logger.debug("Refusing %s -> %s for %s", current.status, new_status, player_id)
            return False
        if new_status == "BoughtUs" and not _is_finite_number(price):
            logger.debug("Refusing purchase of %s with price %r", player_id, price)
            return False

        if new_status == "Available":
            update = {"status": new_status, "actual_price": None, "handled_at": None}
        else:
            update = {
                "status": new_status,
                "actual_price": float(price) if new_status == "BoughtUs" else None,
                "handled_at": self._clock(),
            }
        players[index] = Player.model_validate({**current.model_dump(), **update})
        self._replace(self._state.model_copy(update={"players": players}))
        logger.info("Player %s (%s) -> %s", current.name, player_id, new_status)
        return True

    def clear_players(self) -> None:
        self._replace(self._state.model_copy(update={"players": []}))

    def reset_session(self) -> None:
        self._replace(AuctionState())
        logger.info("Session reset")
