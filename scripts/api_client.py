"""Lightweight REST client for the auction tracker API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the auction tracker REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("roster", type=Path, nargs="?", help="Roster CSV/XLSX to import")
    parser.add_argument("--confirm", action="store_true", help="Confirm the import preview when it has no errors")
    parser.add_argument("--start", nargs=2, metavar=("TEAM", "BUDGET"), help="Start the session")
    parser.add_argument("--list", dest="list_status", metavar="STATUS", help="List players with a status (or All)")
    parser.add_argument("--budget", action="store_true", help="Print the budget summary")
    parser.add_argument("--export-path", type=Path, help="Download the results workbook to this path")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.start:
            team, budget = args.start
            resp = client.post("/session", json={"team_name": team, "budget": float(budget)})
            if resp.status_code == 400:
                raise SystemExit(resp.json()["detail"])
            resp.raise_for_status()
            print(f"Session started for {team}")

        if args.roster is not None:
            files = {"file": (args.roster.name, args.roster.read_bytes(), "application/octet-stream")}
            resp = client.post("/imports", files=files)
            if resp.status_code in (400, 422):
                raise SystemExit(resp.json()["detail"])
            resp.raise_for_status()
            preview = resp.json()
            print(
                f"{len(preview['players'])} players found, "
                f"{preview['error_count']} errors, {preview['warning_count']} warnings"
            )
            for issue in preview["issues"]:
                print(f"  [{issue['type']}] row {issue['row']}: {issue['message']}")
            if args.confirm:
                resp = client.post(f"/imports/{preview['preview_id']}/confirm")
                if resp.status_code == 409:
                    raise SystemExit(resp.json()["detail"])
                resp.raise_for_status()
                _print_json(resp.json())
            else:
                client.delete(f"/imports/{preview['preview_id']}").raise_for_status()

        if args.list_status:
            resp = client.get("/players", params={"status": args.list_status})
            resp.raise_for_status()
            for player in resp.json()["players"]:
                print(f"{player['id']}  {player['name']}  {player['preassigned_points']}  {player['status']}")

        if args.budget:
            resp = client.get("/budget")
            resp.raise_for_status()
            _print_json(resp.json())

        if args.export_path:
            resp = client.get("/export.xlsx")
            resp.raise_for_status()
            args.export_path.write_bytes(resp.content)
            print(f"Export saved to {args.export_path}")


if __name__ == "__main__":
    main()
