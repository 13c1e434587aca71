"""REST API for the auction tracker."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Literal
from urllib.parse import quote
from uuid import uuid4

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from auction_tracker.api.schemas import (
    BudgetResponse,
    ImportConfirmResponse,
    ImportPreviewResponse,
    PlayerListResponse,
    SessionRequest,
    StateResponse,
    TeamResponse,
    TransitionRequest,
)
from auction_tracker.budget import BudgetSummary, budget_for_state, recently_handled, team_summary
from auction_tracker.config import load_settings
from auction_tracker.export import export_results_csv, safe_export_filename, write_workbook
from auction_tracker.ingest import SpreadsheetParseError, build_import_preview, match_columns, read_rows
from auction_tracker.models import ImportPreview, Player, StatusFilter
from auction_tracker.persistence import StateStore, open_roster
from auction_tracker.query import PlayerQuery, query_players, status_counts


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _budget_response(budget: BudgetSummary) -> BudgetResponse:
    return BudgetResponse(
        total_budget=budget.total_budget,
        spent=budget.spent,
        remaining=budget.remaining,
        bought_count=budget.bought_count,
        is_over_budget=budget.is_over_budget,
    )


def _attachment(filename: str) -> str:
    # Header values must be latin-1; non-ASCII names travel in filename*.
    fallback = "".join(char if " " <= char <= "~" and char not in '"\\' else "_" for char in filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def create_app(db_path: Path | str | None = None, *, state_key: str | None = None) -> FastAPI:
    settings = load_settings()
    app = FastAPI(title="auction tracker")
    state_store = StateStore(db_path if db_path is not None else settings.db_path)
    roster = open_roster(state_store, key=state_key or settings.state_key)
    # Only the latest preview waits here, until a confirm or cancel consumes it.
    pending: dict[str, ImportPreview] = {}
    app.state.state_store = state_store
    app.state.roster = roster
    app.state.pending_imports = pending

    def _fetch_player_or_404(player_id: str) -> Player:
        player = roster.get_player(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    def _pop_preview_or_404(preview_id: str) -> ImportPreview:
        preview = pending.pop(preview_id, None)
        if preview is None:
            raise HTTPException(status_code=404, detail="Import preview not found")
        return preview

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/state", response_model=StateResponse)
    async def get_state() -> StateResponse:
        return StateResponse(state=roster.state, budget=_budget_response(budget_for_state(roster.state)))

    @app.post("/session", response_model=StateResponse)
    async def start_session(payload: SessionRequest) -> StateResponse:
        if not roster.start_session(payload.team_name, payload.budget):
            raise HTTPException(status_code=400, detail="A team name and a budget greater than 0 are required")
        return StateResponse(state=roster.state, budget=_budget_response(budget_for_state(roster.state)))

    @app.post("/session/reset", response_model=StateResponse)
    async def reset_session() -> StateResponse:
        roster.reset_session()
        pending.clear()
        return StateResponse(state=roster.state, budget=_budget_response(budget_for_state(roster.state)))

    @app.post("/imports", response_model=ImportPreviewResponse)
    async def preview_import(file: UploadFile = File(...)) -> ImportPreviewResponse:
        contents = await file.read()
        if not contents:
            raise HTTPException(status_code=400, detail="Roster file is empty")
        filename = file.filename or "upload.csv"
        try:
            rows = read_rows(contents, filename=filename)
        except SpreadsheetParseError as exc:
            raise HTTPException(status_code=400, detail=f"Error parsing file: {exc}") from exc

        preview = build_import_preview(rows, roster.players)
        headers = list(dict.fromkeys(str(key) for row in rows for key in row))
        if preview.is_empty:
            raise HTTPException(
                status_code=422,
                detail="Headers not recognized. Please check columns like 'Player Name' and 'Points'.",
            )
        preview_id = uuid4().hex
        pending.clear()
        pending[preview_id] = preview
        return ImportPreviewResponse(
            preview_id=preview_id,
            filename=filename,
            players=preview.players,
            issues=preview.issues,
            error_count=len(preview.errors),
            warning_count=len(preview.warnings),
            can_confirm=preview.can_confirm,
            matched_columns=match_columns(headers),
        )

    @app.post("/imports/{preview_id}/confirm", response_model=ImportConfirmResponse)
    async def confirm_import(preview_id: str) -> ImportConfirmResponse:
        preview = _pop_preview_or_404(preview_id)
        if not preview.can_confirm:
            raise HTTPException(
                status_code=409,
                detail=f"Import blocked by {len(preview.errors)} errors; fix the file and upload again",
            )
        before = len(roster.players)
        roster.confirm_import(preview)
        return ImportConfirmResponse(imported=len(roster.players) - before, roster_size=len(roster.players))

    @app.delete("/imports/{preview_id}")
    async def cancel_import(preview_id: str) -> dict[str, str]:
        _pop_preview_or_404(preview_id)
        return {"preview_id": preview_id, "status": "canceled"}

    @app.get("/players", response_model=PlayerListResponse)
    async def list_players(
        name: str = "",
        number: str = "",
        status: StatusFilter = "Available",
        sort_by: Literal["name", "points"] = "points",
        order: Literal["asc", "desc"] = Query("desc"),
    ) -> PlayerListResponse:
        players = roster.players
        query = PlayerQuery(
            name_query=name,
            number_query=number,
            status=status,
            sort_by=sort_by,
            sort_order=order,
        )
        results = query_players(players, query)
        return PlayerListResponse(players=results, total=len(players), counts=status_counts(players))

    @app.delete("/players")
    async def clear_players() -> dict[str, int]:
        roster.clear_players()
        return {"roster_size": 0}

    @app.get("/players/{player_id}", response_model=Player)
    async def get_player(player_id: str) -> Player:
        return _fetch_player_or_404(player_id)

    @app.post("/players/{player_id}/status", response_model=Player)
    async def transition_player(player_id: str, payload: TransitionRequest) -> Player:
        current = _fetch_player_or_404(player_id)
        if not roster.transition(player_id, payload.status, payload.price):
            raise HTTPException(
                status_code=400,
                detail=f"Cannot move {current.name} from {current.status} to {payload.status}",
            )
        return _fetch_player_or_404(player_id)

    @app.get("/budget", response_model=BudgetResponse)
    async def get_budget() -> BudgetResponse:
        return _budget_response(budget_for_state(roster.state))

    @app.get("/team", response_model=TeamResponse)
    async def get_team() -> TeamResponse:
        summary = team_summary(roster.players)
        return TeamResponse(
            players=list(summary.players),
            average_cost=summary.average_cost,
            efficiency_percent=summary.efficiency_percent,
            recently_handled=recently_handled(roster.players),
        )

    @app.get("/export.xlsx")
    async def export_xlsx() -> Response:
        state = roster.state
        content = write_workbook(state, exported_at=datetime.now(timezone.utc))
        return Response(
            content=content,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": _attachment(f"{safe_export_filename(state.team_name)}.xlsx")},
        )

    @app.get("/export.csv")
    async def export_csv() -> Response:
        state = roster.state
        return Response(
            content=export_results_csv(state),
            media_type="text/csv",
            headers={"Content-Disposition": _attachment(f"{safe_export_filename(state.team_name)}.csv")},
        )

    return app


__all__ = ["create_app"]
