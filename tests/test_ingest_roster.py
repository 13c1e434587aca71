import itertools

import pytest

from auction_tracker.ingest import (
    build_import_preview,
    find_header,
    match_columns,
    parse_points,
    resolve_field,
    validate_row,
)
from auction_tracker.models import Player


def _ids():
    counter = itertools.count(1)
    return lambda: f"p{next(counter)}"


def test_resolve_field_ignores_case_and_whitespace():
    row = {"  Player Name ": "Sam Ali", "POINTS": "500"}
    assert resolve_field(row, "name") == "Sam Ali"
    assert resolve_field(row, "preassigned_points") == "500"


def test_resolve_field_follows_synonym_priority():
    row = {"player": "Fallback", "Player Name": "Preferred"}
    assert resolve_field(row, "name") == "Preferred"


def test_resolve_field_missing_returns_none():
    assert resolve_field({"foo": 1}, "name") is None
    assert find_header(["foo"], "notes") is None


def test_match_columns_reports_headers():
    matched = match_columns(["Sr No", "Player", "Base Price", "Club"])
    assert matched == {
        "player_no": "Sr No",
        "name": "Player",
        "parish_name": "Club",
        "preassigned_points": "Base Price",
    }


@pytest.mark.parametrize(
    "value, expected",
    [(500, 500.0), ("12.5", 12.5), (" 7 ", 7.0), ("abc", None), ("", None), (None, None), (True, None), (-3, None)],
)
def test_parse_points(value, expected):
    assert parse_points(value) == expected


def test_validate_row_builds_available_candidate():
    row = {"No": 7.0, "Name": " Sam Ali ", "Points": 300, "Role": "Bowler", "Tier": "High"}
    player, issues = validate_row(row, 1, id_factory=lambda: "p1")

    assert issues == []
    assert player is not None
    assert player.id == "p1"
    assert player.player_no == "7"
    assert player.name == "Sam Ali"
    assert player.preassigned_points == 300
    assert player.status == "Available"
    assert player.role == "Bowler"
    assert player.priority == "High"
    assert player.actual_price is None
    assert player.handled_at is None


def test_validate_row_missing_points_defaults_to_zero():
    player, issues = validate_row({"Name": "Sam Ali"}, 3)

    assert player is not None
    assert player.preassigned_points == 0
    assert [(issue.field, issue.type, issue.row) for issue in issues] == [("points", "error", 3)]
    assert issues[0].message == "Missing or invalid points"


def test_validate_row_missing_name_uses_placeholder():
    player, issues = validate_row({"Points": "100"}, 2)

    assert player is not None
    assert player.name == "Unknown Player"
    assert [(issue.field, issue.message) for issue in issues] == [("name", "Missing player name")]


def test_validate_row_with_only_notes_still_emits_candidate():
    player, issues = validate_row({"Notes": "check fitness"}, 4)

    assert player is not None
    assert player.name == "Unknown Player"
    assert {issue.field for issue in issues} == {"name", "points"}


def test_validate_row_skips_blank_rows():
    assert validate_row({}, 1) == (None, [])
    assert validate_row({"Name": "  ", "Points": ""}, 1) == (None, [])
    assert validate_row({"Unrelated": "x"}, 1) == (None, [])


def test_duplicate_names_in_batch_warn_once():
    rows = [
        {"Player Name": "Sam Ali", "Points": 100},
        {"Player Name": "  sam ALI ", "Points": 200},
    ]
    preview = build_import_preview(rows, id_factory=_ids())

    assert len(preview.players) == 2
    assert len(preview.warnings) == 1
    warning = preview.warnings[0]
    assert warning.row == 2
    assert warning.message == "Duplicate name: sam ALI"
    assert preview.can_confirm


def test_duplicate_against_existing_roster_is_warning():
    existing = [Player(id="old", name="Sam Ali", preassigned_points=50)]
    preview = build_import_preview([{"Name": "sam ali", "Points": 10}], existing, id_factory=_ids())

    assert [issue.type for issue in preview.issues] == ["warning"]
    assert len(preview.players) == 1
    assert preview.can_confirm


def test_preview_collects_errors_and_row_numbers():
    rows = [
        {"Name": "A", "Points": 10},
        {},
        {"Name": "B", "Points": "n/a"},
    ]
    preview = build_import_preview(rows, id_factory=_ids())

    assert [player.name for player in preview.players] == ["A", "B"]
    assert [(issue.row, issue.field) for issue in preview.errors] == [(3, "points")]
    assert not preview.can_confirm


def test_unrecognized_headers_yield_empty_preview():
    preview = build_import_preview([{"Foo": "x", "Bar": 1}, {"Foo": "y"}])
    assert preview.is_empty


def test_custom_synonyms_extend_lookup():
    synonyms = {"name": ("player name", "name", "full name")}
    player, issues = validate_row({"Full Name": "Sam Ali", "Points": 1}, 1, synonyms=synonyms)
    assert player is not None and player.name == "Sam Ali"
    assert issues == []
