"""Results and summary export for an auction session."""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from openpyxl import Workbook

from auction_tracker.budget import BudgetSummary, budget_for_state
from auction_tracker.models import AuctionState, Player


class ExportError(RuntimeError):
    """Raised when an export cannot be written."""


STATUS_LABELS = {
    "BoughtUs": "Bought by Us",
    "SoldOther": "Sold to Others",
    "Available": "Available",
}

RESULTS_SHEET = "Auction Results"
SUMMARY_SHEET = "Summary"

RESULTS_HEADERS: tuple[str, ...] = (
    "Player Name",
    "Status",
    "Preassigned Points",
    "Final Price",
    "Role",
    "Priority",
    "Notes",
    "Handled At",
)

_EMPTY = "-"
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


@dataclass(frozen=True)
class ExportSheets:
    filename: str
    results: list[list[Any]]
    summary: list[list[Any]]


def export_filename(team_name: str) -> str:
    return f"{team_name}_Auction_Tracker_Export"


def safe_export_filename(team_name: str) -> str:
    """``export_filename`` with path separators and reserved characters replaced.

    The result is always a single path component, so it cannot climb out of
    the export directory.
    """

    stem = _UNSAFE_FILENAME_CHARS.sub("_", team_name).strip().lstrip(".")
    return export_filename(stem or "Team")


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return _EMPTY
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _number(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def _result_row(player: Player) -> list[Any]:
    return [
        player.name,
        STATUS_LABELS[player.status],
        _number(player.preassigned_points),
        _number(player.actual_price) if player.status == "BoughtUs" and player.actual_price is not None else _EMPTY,
        player.role or _EMPTY,
        player.priority or _EMPTY,
        player.notes or _EMPTY,
        format_timestamp(player.handled_at),
    ]


def build_results_rows(players: Sequence[Player]) -> list[list[Any]]:
    return [list(RESULTS_HEADERS), *(_result_row(player) for player in players)]


def build_summary_rows(
    state: AuctionState,
    budget: BudgetSummary,
    *,
    exported_at: datetime,
) -> list[list[Any]]:
    return [
        ["Auction Summary", ""],
        ["Team Name", state.team_name],
        ["Total Budget", _number(budget.total_budget)],
        ["Points Spent", _number(budget.spent)],
        ["Remaining Points", _number(budget.remaining)],
        ["Total Players Bought", budget.bought_count],
        ["Exported On", format_timestamp(exported_at)],
    ]


def build_export(state: AuctionState, *, exported_at: datetime | None = None) -> ExportSheets:
    """Project the state into both export sheets without touching the store."""

    exported_at = exported_at or datetime.now(timezone.utc)
    budget = budget_for_state(state)
    return ExportSheets(
        filename=export_filename(state.team_name),
        results=build_results_rows(state.players),
        summary=build_summary_rows(state, budget, exported_at=exported_at),
    )


def write_workbook(state: AuctionState, *, exported_at: datetime | None = None) -> bytes:
    sheets = build_export(state, exported_at=exported_at)
    workbook = Workbook()
    results_ws = workbook.active
    results_ws.title = RESULTS_SHEET
    for row in sheets.results:
        results_ws.append(row)
    summary_ws = workbook.create_sheet(SUMMARY_SHEET)
    for row in sheets.summary:
        summary_ws.append(row)

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def save_workbook(
    state: AuctionState,
    directory: Path,
    *,
    exported_at: datetime | None = None,
) -> Path:
    """Write ``<teamName>_Auction_Tracker_Export.xlsx`` into ``directory``."""

    target = directory / f"{safe_export_filename(state.team_name)}.xlsx"
    if target.parent != directory:
        raise ExportError(f"Refusing to write export outside {directory}: {target}")
    try:
        directory.mkdir(parents=True, exist_ok=True)
        target.write_bytes(write_workbook(state, exported_at=exported_at))
    except OSError as exc:
        raise ExportError(f"Unable to write export to {target}: {exc}") from exc
    return target


def export_results_csv(state: AuctionState) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    for row in build_results_rows(state.players):
        writer.writerow(row)
    return buffer.getvalue()
