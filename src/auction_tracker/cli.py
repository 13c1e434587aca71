"""Command-line interface for running an auction session from a terminal."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from auction_tracker.budget import budget_for_state, recently_handled, team_summary
from auction_tracker.config import load_settings
from auction_tracker.config_loader import SynonymProfile
from auction_tracker.export import ExportError, save_workbook
from auction_tracker.ingest import SpreadsheetParseError, build_import_preview, load_rows, match_columns
from auction_tracker.models import Player
from auction_tracker.persistence import StateStore, open_roster
from auction_tracker.query import PlayerQuery, query_players
from auction_tracker.store import RosterStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Track a live player auction for one team")
    parser.add_argument("--db", type=Path, default=None, help="SQLite file holding the session state")
    parser.add_argument("--state-key", default=None, help="Snapshot key (default auction_tracker_v1)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    setup = sub.add_parser("setup", help="Start the session with a team name and budget")
    setup.add_argument("team_name")
    setup.add_argument("budget", type=float)

    imp = sub.add_parser("import", help="Preview a roster file and optionally merge it")
    imp.add_argument("path", type=Path, help="CSV or XLSX roster")
    imp.add_argument("--yes", action="store_true", help="Merge the previewed players when there are no errors")
    imp.add_argument("--load-profile", type=Path, default=None, help="JSON file with extra column synonyms")
    imp.add_argument("--report", type=Path, default=None, help="Write the preview issues as JSON")

    players = sub.add_parser("players", help="List players")
    players.add_argument("--name", default="", help="Case-insensitive name substring")
    players.add_argument("--number", default="", help="Exact player number")
    players.add_argument(
        "--status",
        default="Available",
        choices=["All", "Available", "SoldOther", "BoughtUs"],
    )
    players.add_argument("--sort", default="points", choices=["name", "points"])
    players.add_argument("--order", default="desc", choices=["asc", "desc"])

    buy = sub.add_parser("buy", help="Mark a player as bought by us")
    buy.add_argument("player", help="Player id or player number")
    buy.add_argument("price", type=float)

    sell = sub.add_parser("sell", help="Mark a player as sold to another team")
    sell.add_argument("player", help="Player id or player number")

    undo = sub.add_parser("undo", help="Return a player to Available")
    undo.add_argument("player", help="Player id or player number")

    sub.add_parser("budget", help="Show spent and remaining points")
    sub.add_parser("team", help="Show the players bought so far")

    export = sub.add_parser("export", help="Write the results workbook")
    export.add_argument("--output-dir", type=Path, default=Path("."))

    clear = sub.add_parser("clear", help="Remove every player but keep team and budget")
    clear.add_argument("--yes", action="store_true")

    reset = sub.add_parser("reset", help="Discard the whole session")
    reset.add_argument("--yes", action="store_true")
    return parser


def _format_points(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"


def _format_player(player: Player) -> str:
    number = f"#{player.player_no} " if player.player_no else ""
    price = f" paid={_format_points(player.actual_price)}" if player.actual_price is not None else ""
    return f"{player.id}  {number}{player.name}  points={_format_points(player.preassigned_points)}  {player.status}{price}"


def _resolve_player(store: RosterStore, identifier: str) -> Player:
    player = store.get_player(identifier)
    if player is not None:
        return player
    matches = store.find_by_player_no(identifier)
    if len(matches) == 1:
        return matches[0]
    if matches:
        ids = ", ".join(match.id for match in matches)
        raise SystemExit(f"Player number {identifier} is ambiguous; use one of: {ids}")
    raise SystemExit(f"Player {identifier} not found")


def _run_import(store: RosterStore, args: argparse.Namespace) -> None:
    synonyms = SynonymProfile.load(args.load_profile).table() if args.load_profile else None
    try:
        rows = load_rows(args.path)
    except SpreadsheetParseError as exc:
        raise SystemExit(f"Error parsing file: {exc}") from exc

    preview = build_import_preview(rows, store.players, synonyms=synonyms)
    if preview.is_empty:
        headers = sorted({str(key) for row in rows for key in row})
        matched = match_columns(headers, synonyms=synonyms)
        raise SystemExit(
            "Headers not recognized. Please check columns like 'Player Name' and 'Points'. "
            f"Found: {', '.join(headers) or 'none'}; matched: {json.dumps(matched)}"
        )

    print(
        f"{len(preview.players)} players found, "
        f"{len(preview.errors)} errors, {len(preview.warnings)} warnings"
    )
    for issue in [*preview.errors, *preview.warnings]:
        print(f"  [{issue.type}] row {issue.row}: {issue.message}")
    if args.report:
        payload = [issue.model_dump() for issue in preview.issues]
        args.report.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote import report to {args.report}")

    if not args.yes:
        print("Preview only; re-run with --yes to merge")
        return
    if not store.confirm_import(preview):
        raise SystemExit("Import blocked: fix the errors above and re-import")
    print(f"Imported {len(preview.players)} players ({len(store.players)} in roster)")


def _print_budget(store: RosterStore) -> None:
    budget = budget_for_state(store.state)
    print(f"Team: {store.state.team_name or '-'}")
    print(f"Total budget: {_format_points(budget.total_budget)}")
    print(f"Spent: {_format_points(budget.spent)}")
    print(f"Remaining: {_format_points(budget.remaining)}")
    if budget.is_over_budget:
        print("OVER BUDGET")


def main(argv: Sequence[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    settings = load_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    state_store = StateStore(args.db if args.db is not None else settings.db_path)
    store = open_roster(state_store, key=args.state_key or settings.state_key)

    if args.command == "setup":
        if not store.start_session(args.team_name, args.budget):
            raise SystemExit("A team name and a budget greater than 0 are required")
        print(f"Auction started for {store.state.team_name} with {_format_points(args.budget)} points")
    elif args.command == "import":
        _run_import(store, args)
    elif args.command == "players":
        query = PlayerQuery(
            name_query=args.name,
            number_query=args.number,
            status=args.status,
            sort_by=args.sort,
            sort_order=args.order,
        )
        results = query_players(store.players, query)
        for player in results:
            print(_format_player(player))
        print(f"{len(results)} of {len(store.players)} players")
    elif args.command in {"buy", "sell", "undo"}:
        player = _resolve_player(store, args.player)
        if args.command == "buy":
            applied = store.transition(player.id, "BoughtUs", args.price)
        elif args.command == "sell":
            applied = store.transition(player.id, "SoldOther")
        else:
            applied = store.transition(player.id, "Available")
        if not applied:
            raise SystemExit(f"Cannot change {player.name} from {player.status}; undo it first")
        print(_format_player(store.get_player(player.id) or player))
        if args.command == "buy":
            _print_budget(store)
    elif args.command == "budget":
        _print_budget(store)
    elif args.command == "team":
        summary = team_summary(store.players)
        print(f"{len(summary.players)} players bought")
        print(f"Avg cost: {summary.average_cost}  Efficiency: {summary.efficiency_percent}%")
        for player in summary.players:
            print(_format_player(player))
        recent = recently_handled(store.players)
        if recent:
            print("Recent activity:")
            for player in recent:
                print(f"  {_format_player(player)}")
    elif args.command == "export":
        try:
            target = save_workbook(store.state, args.output_dir)
        except ExportError as exc:
            raise SystemExit(str(exc)) from exc
        print(f"Wrote export to {target}")
    elif args.command == "clear":
        if not args.yes:
            raise SystemExit("Refusing to clear the player list without --yes")
        store.clear_players()
        print("Player list cleared")
    elif args.command == "reset":
        if not args.yes:
            raise SystemExit("Refusing to reset the session without --yes")
        store.reset_session()
        print("Session reset")


if __name__ == "__main__":
    main()
