import io
from urllib.parse import quote

import pytest
from httpx import ASGITransport, AsyncClient
from openpyxl import load_workbook

from auction_tracker.api import create_app


@pytest.fixture
async def client(tmp_path):
    app = create_app(tmp_path / "api.sqlite")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


def _roster_csv() -> str:
    return """Sr No,Player Name,Points,Role,Tier
1,Sam Ali,500,Bowler,High
2,Bob Stone,300,Batsman,Low
101,Cal Reed,200,All-rounder,Medium
"""


async def _import(client: AsyncClient, text: str, filename: str = "roster.csv") -> dict:
    resp = await client.post("/imports", files={"file": (filename, text, "text/csv")})
    assert resp.status_code == 200, resp.text
    return resp.json()


async def _seed(client: AsyncClient) -> list[dict]:
    resp = await client.post("/session", json={"team_name": "Lions", "budget": 1000})
    assert resp.status_code == 200
    preview = await _import(client, _roster_csv())
    resp = await client.post(f"/imports/{preview['preview_id']}/confirm")
    assert resp.status_code == 200
    return preview["players"]


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_session_guard(client: AsyncClient):
    resp = await client.post("/session", json={"team_name": "", "budget": 1000})
    assert resp.status_code == 400

    resp = await client.post("/session", json={"team_name": "Lions", "budget": 0})
    assert resp.status_code == 400

    resp = await client.post("/session", json={"team_name": "Lions", "budget": 1000})
    assert resp.status_code == 200
    body = resp.json()
    assert body["state"]["is_started"] is True
    assert body["budget"]["remaining"] == 1000


@pytest.mark.anyio
async def test_import_preview_and_confirm(client: AsyncClient):
    preview = await _import(client, _roster_csv())
    assert len(preview["players"]) == 3
    assert preview["can_confirm"] is True
    assert preview["matched_columns"]["priority"] == "Tier"

    resp = await client.post(f"/imports/{preview['preview_id']}/confirm")
    assert resp.status_code == 200
    assert resp.json() == {"imported": 3, "roster_size": 3}

    # A preview is consumed by its first decision.
    resp = await client.post(f"/imports/{preview['preview_id']}/confirm")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_import_duplicates_against_roster_warn(client: AsyncClient):
    await _seed(client)
    preview = await _import(client, "Name,Points\nsam ali,10\n")
    assert preview["warning_count"] == 1
    assert preview["issues"][0]["message"] == "Duplicate name: sam ali"
    assert preview["can_confirm"] is True


@pytest.mark.anyio
async def test_import_with_errors_is_blocked(client: AsyncClient):
    preview = await _import(client, "Name,Points\nSam Ali,\n")
    assert preview["error_count"] == 1
    assert preview["can_confirm"] is False

    resp = await client.post(f"/imports/{preview['preview_id']}/confirm")
    assert resp.status_code == 409
    state = (await client.get("/state")).json()["state"]
    assert state["players"] == []


@pytest.mark.anyio
async def test_import_cancel(client: AsyncClient):
    preview = await _import(client, _roster_csv())
    resp = await client.delete(f"/imports/{preview['preview_id']}")
    assert resp.status_code == 200
    resp = await client.post(f"/imports/{preview['preview_id']}/confirm")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_import_unrecognized_headers(client: AsyncClient):
    resp = await client.post("/imports", files={"file": ("roster.csv", "Foo,Bar\nx,1\n", "text/csv")})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_import_parse_failure(client: AsyncClient):
    resp = await client.post("/imports", files={"file": ("roster.xlsx", b"garbage", "application/octet-stream")})
    assert resp.status_code == 400
    assert "Error parsing file" in resp.json()["detail"]


@pytest.mark.anyio
async def test_player_query(client: AsyncClient):
    await _seed(client)

    resp = await client.get("/players", params={"number": "1", "status": "All"})
    assert [player["name"] for player in resp.json()["players"]] == ["Sam Ali"]

    resp = await client.get("/players", params={"sort_by": "name", "order": "asc"})
    body = resp.json()
    assert [player["name"] for player in body["players"]] == ["Bob Stone", "Cal Reed", "Sam Ali"]
    assert body["counts"]["Available"] == 3


@pytest.mark.anyio
async def test_transitions_and_budget(client: AsyncClient):
    players = await _seed(client)
    sam = next(player for player in players if player["name"] == "Sam Ali")
    bob = next(player for player in players if player["name"] == "Bob Stone")

    resp = await client.post(f"/players/{sam['id']}/status", json={"status": "BoughtUs", "price": 600})
    assert resp.status_code == 200
    assert resp.json()["actual_price"] == 600
    assert resp.json()["handled_at"] is not None

    resp = await client.post(f"/players/{bob['id']}/status", json={"status": "BoughtUs"})
    assert resp.status_code == 400

    resp = await client.post(f"/players/{sam['id']}/status", json={"status": "SoldOther"})
    assert resp.status_code == 400

    resp = await client.post("/players/nope/status", json={"status": "SoldOther"})
    assert resp.status_code == 404

    resp = await client.post(f"/players/{bob['id']}/status", json={"status": "BoughtUs", "price": 500})
    budget = (await client.get("/budget")).json()
    assert budget["spent"] == 1100
    assert budget["remaining"] == -100
    assert budget["is_over_budget"] is True

    team = (await client.get("/team")).json()
    assert team["average_cost"] == 550
    assert [player["name"] for player in team["recently_handled"]] == ["Bob Stone", "Sam Ali"]

    resp = await client.post(f"/players/{sam['id']}/status", json={"status": "Available"})
    assert resp.json()["actual_price"] is None
    assert resp.json()["handled_at"] is None


@pytest.mark.anyio
async def test_exports(client: AsyncClient):
    players = await _seed(client)
    await client.post(f"/players/{players[0]['id']}/status", json={"status": "BoughtUs", "price": 450})

    resp = await client.get("/export.xlsx")
    assert resp.status_code == 200
    assert "Lions_Auction_Tracker_Export.xlsx" in resp.headers["content-disposition"]
    workbook = load_workbook(io.BytesIO(resp.content))
    assert workbook.sheetnames == ["Auction Results", "Summary"]

    resp = await client.get("/export.csv")
    assert resp.status_code == 200
    assert resp.text.splitlines()[1].startswith("Sam Ali,Bought by Us,500,450")


@pytest.mark.anyio
async def test_state_persists_across_apps(tmp_path):
    db_path = tmp_path / "shared.sqlite"
    app = create_app(db_path)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as first:
        await first.post("/session", json={"team_name": "Lions", "budget": 1000})

    app = create_app(db_path)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as second:
        state = (await second.get("/state")).json()["state"]
    assert state["team_name"] == "Lions"


@pytest.mark.anyio
async def test_clear_and_reset(client: AsyncClient):
    await _seed(client)
    resp = await client.delete("/players")
    assert resp.status_code == 200
    state = (await client.get("/state")).json()["state"]
    assert state["players"] == []
    assert state["team_name"] == "Lions"

    resp = await client.post("/session/reset")
    assert resp.json()["state"] == {"team_name": "", "total_budget": 0.0, "players": [], "is_started": False}


@pytest.mark.anyio
async def test_only_latest_preview_is_kept(client: AsyncClient):
    first = await _import(client, _roster_csv())
    second = await _import(client, _roster_csv())

    resp = await client.post(f"/imports/{first['preview_id']}/confirm")
    assert resp.status_code == 404
    resp = await client.post(f"/imports/{second['preview_id']}/confirm")
    assert resp.status_code == 200


@pytest.mark.anyio
async def test_export_with_non_ascii_team_name(client: AsyncClient):
    team = "Kochi Tuskers कोचि"
    await client.post("/session", json={"team_name": team, "budget": 1000})

    resp = await client.get("/export.xlsx")
    assert resp.status_code == 200
    disposition = resp.headers["content-disposition"]
    assert disposition.isascii()
    assert disposition.startswith('attachment; filename="Kochi Tuskers ')
    assert f"filename*=UTF-8''{quote(team + '_Auction_Tracker_Export.xlsx')}" in disposition
    assert load_workbook(io.BytesIO(resp.content))["Summary"]["B2"].value == team


@pytest.mark.anyio
async def test_export_with_quote_in_team_name(client: AsyncClient):
    await client.post("/session", json={"team_name": 'Tigers "XI"', "budget": 1000})

    resp = await client.get("/export.csv")
    assert resp.status_code == 200
    disposition = resp.headers["content-disposition"]
    assert 'filename="Tigers _XI__Auction_Tracker_Export.csv"' in disposition
    assert disposition.count('"') == 2
