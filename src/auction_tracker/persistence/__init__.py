"""Persistence layer for auction state snapshots."""

from __future__ import annotations

import json
import logging
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from auction_tracker.config.settings import DEFAULT_STATE_KEY, db_path_from_env
from auction_tracker.models import AuctionState
from auction_tracker.store import RosterStore


logger = logging.getLogger(__name__)


@dataclass
class SnapshotRecord:
    key: str
    updated_at: datetime
    payload: dict


class StateStore:
    """Simple SQLite-backed key/value store of :class:`AuctionState` snapshots."""

    def __init__(self, db_path: Path | str | None = None):
        self._use_uri = False
        if db_path is None:
            db_path = db_path_from_env()
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: Path | str = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _fallback_connection(self) -> sqlite3.Connection:
        fallback_dir = Path(tempfile.gettempdir()) / "auction-tracker-runtime"
        fallback_dir.mkdir(parents=True, exist_ok=True)
        fallback = fallback_dir / "auction_tracker.sqlite"
        logger.warning("Unable to open %s; falling back to %s", self.db_path, fallback)
        conn = sqlite3.connect(fallback)
        self.db_path = fallback
        self._use_uri = False
        self._create_schema(conn)
        return conn

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except (sqlite3.OperationalError, OSError):
            conn = self._fallback_connection()
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        conn = self._connect()
        try:
            self._create_schema(conn)
        finally:
            conn.close()

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS snapshots (
                key TEXT PRIMARY KEY,
                payload_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def save_state(self, state: AuctionState, *, key: str = DEFAULT_STATE_KEY) -> None:
        payload = json.dumps(state.model_dump(mode="json"))
        updated_at = datetime.now(timezone.utc).isoformat()
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO snapshots (key, payload_json, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    payload_json = excluded.payload_json,
                    updated_at = excluded.updated_at
                """,
                (key, payload, updated_at),
            )
            conn.commit()
        finally:
            conn.close()

    def get_snapshot(self, key: str = DEFAULT_STATE_KEY) -> Optional[SnapshotRecord]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM snapshots WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        try:
            payload = json.loads(row["payload_json"])
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring unreadable snapshot %s: %s", key, exc)
            return None
        return SnapshotRecord(
            key=row["key"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
            payload=payload,
        )

    def load_state(self, key: str = DEFAULT_STATE_KEY) -> AuctionState:
        """Return the stored state, or a fresh default when none is usable."""

        snapshot = self.get_snapshot(key)
        if snapshot is None:
            return AuctionState()
        try:
            return AuctionState.model_validate(snapshot.payload)
        except ValidationError as exc:
            logger.warning("Ignoring snapshot %s that no longer matches the schema: %s", key, exc)
            return AuctionState()

    def delete_state(self, key: str = DEFAULT_STATE_KEY) -> bool:
        conn = self._connect()
        try:
            cursor = conn.execute("DELETE FROM snapshots WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
        return cursor.rowcount > 0


def open_roster(state_store: StateStore, *, key: str = DEFAULT_STATE_KEY) -> RosterStore:
    """Load the persisted state and save a fresh snapshot after every change."""

    def _persist(state: AuctionState) -> None:
        state_store.save_state(state, key=key)

    return RosterStore(state_store.load_state(key), on_change=_persist)


__all__ = ["SnapshotRecord", "StateStore", "open_roster"]
