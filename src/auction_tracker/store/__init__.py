"""In-memory owner of the auction state."""

from .roster import RosterStore, StateListener

__all__ = ["RosterStore", "StateListener"]
