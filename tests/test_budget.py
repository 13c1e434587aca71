from datetime import datetime, timedelta, timezone

from auction_tracker.budget import calculate_budget, recently_handled, team_summary
from auction_tracker.models import Player


NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _bought(player_id: str, price: float, points: float = 100, minutes: int = 0) -> Player:
    return Player(
        id=player_id,
        name=player_id.upper(),
        preassigned_points=points,
        status="BoughtUs",
        actual_price=price,
        handled_at=NOW + timedelta(minutes=minutes),
    )


def test_budget_spent_and_remaining():
    players = [_bought("a", 500), _bought("b", 300), Player(id="c", name="C", preassigned_points=50)]
    budget = calculate_budget(players, 1000)

    assert budget.spent == 800
    assert budget.remaining == 200
    assert budget.bought_count == 2
    assert not budget.is_over_budget


def test_over_budget_is_a_valid_state():
    budget = calculate_budget([_bought("a", 700), _bought("b", 500)], 1000)
    assert budget.remaining == -200
    assert budget.is_over_budget


def test_sold_players_do_not_count():
    sold = Player(id="s", name="S", status="SoldOther", handled_at=NOW)
    assert calculate_budget([sold], 100).spent == 0


def test_team_summary():
    summary = team_summary([_bought("a", 200, points=300), _bought("b", 100, points=150)])
    assert summary.average_cost == 150
    assert summary.efficiency_percent == 150
    assert [player.id for player in summary.players] == ["a", "b"]

    empty = team_summary([])
    assert empty.average_cost == 0
    assert empty.efficiency_percent == 0


def test_team_summary_with_free_purchase():
    assert team_summary([_bought("a", 0)]).efficiency_percent == 0


def test_recently_handled_newest_first():
    players = [_bought(f"p{idx}", 10, minutes=idx) for idx in range(7)]
    players.append(Player(id="avail", name="Avail"))

    recent = recently_handled(players)
    assert [player.id for player in recent] == ["p6", "p5", "p4", "p3", "p2"]
    assert recently_handled(players, limit=0) == []
