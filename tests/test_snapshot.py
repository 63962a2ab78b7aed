# Area: Game Tests
"""Tests for buzzer_quiz._game.snapshot: game snapshot builder."""

from buzzer_quiz._game import GameSnapshot, Team, TeamState
from buzzer_quiz._game.snapshot import build_snapshot
from buzzer_quiz.settings import Settings


def _teams(timer_factory, *money):
    teams = []
    for index, amount in enumerate(money):
        team = Team(index, Settings(), timer_factory)
        team.money_add(amount)
        teams.append(team)
    return teams


def test_snapshot_captures_teams(timer_factory):
    """Each team is captured with its money, state and round history."""
    teams = _teams(timer_factory, 200, -100)
    teams[0].record_end_of_round()
    teams[1].set_state(TeamState.CAN_ANSWER)

    snapshot = build_snapshot("waitForBuzzes", teams, 12345.9, rounds_played=1)

    assert snapshot.state_name == "waitForBuzzes"
    assert snapshot.elapsed_game_time_ms == 12345
    assert snapshot.rounds_played == 1
    assert snapshot.teams[0].money_at_end_of_each_round == [200]
    assert snapshot.teams[1].state == "can-answer"


def test_snapshot_is_a_copy(timer_factory):
    """Later play does not change an earlier snapshot."""
    teams = _teams(timer_factory, 100)
    teams[0].record_end_of_round()
    snapshot = build_snapshot("showAnswer", teams, 0, rounds_played=1)

    teams[0].money_add(500)
    teams[0].record_end_of_round()

    assert snapshot.teams[0].money == 100
    assert snapshot.teams[0].money_at_end_of_each_round == [100]


def test_ranking_highest_first(timer_factory):
    teams = _teams(timer_factory, 0, 800, -200, 400)
    snapshot = build_snapshot("gameEnd", teams, 0, rounds_played=3)
    assert [t.name for t in snapshot.ranking()] == ["Team 2", "Team 4", "Team 1", "Team 3"]


def test_snapshot_round_trips_through_json(timer_factory):
    snapshot = build_snapshot("idle", _teams(timer_factory, 300), 0, rounds_played=0)
    restored = GameSnapshot.model_validate_json(snapshot.model_dump_json())
    assert restored == snapshot
