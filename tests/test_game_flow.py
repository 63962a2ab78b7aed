# Area: Game Tests
"""End-to-end tests of the quiz flow through QuizGame."""

import asyncio
from unittest.mock import MagicMock

import pytest

from buzzer_quiz import QuizGame, Settings, TeamState
from buzzer_quiz.collaborators import LoggingAudioPlayer, LoggingPresentation
from buzzer_quiz.errors import PromiseTransitionError


CLUE = {"category": "Science", "value": 200, "question": "H2O is this", "answer": "Water"}


def _source(*records):
    """Async clue source returning the given records in turn, then the last forever."""
    remaining = list(records) or [CLUE]

    async def fetch():
        if len(remaining) > 1:
            return remaining.pop(0)
        return remaining[0]

    return fetch


def _game(scheduler, settings=None, source=None, console=None):
    return QuizGame(
        source or _source(),
        settings=settings or Settings(team_count=3),
        presentation=LoggingPresentation(),
        audio=LoggingAudioPlayer(),
        console=console or MagicMock(),
        scheduler=scheduler,
        clock=scheduler.clock,
    )


async def _to_question(game, scheduler):
    """Start the game and run until the question is being read."""
    game.start()
    game.trigger("startGame")
    await game.drain()
    assert game.present_state_name == "showClueCategoryAndValue"
    scheduler.advance_ms(game.settings.display_duration_category_ms + 1)
    assert game.present_state_name == "showClueQuestion"


class TestRound:
    """A full clue from fetch to the next fetch."""

    def test_correct_answer_round(self, scheduler):
        async def scenario():
            game = _game(scheduler)
            await _to_question(game, scheduler)
            assert all(t.state is TeamState.READING_QUESTION for t in game.teams)

            game.press_key(" ")
            assert game.present_state_name == "waitForBuzzes"
            assert all(t.state is TeamState.CAN_ANSWER for t in game.teams)

            game.press_key("1")
            assert game.present_state_name == "waitForTeamAnswer"
            assert game.teams[0].state is TeamState.ANSWERING

            game.press_key("y")
            assert game.present_state_name == "showAnswer"
            assert game.teams[0].money == 200
            assert all(t.state is TeamState.BUZZERS_OFF for t in game.teams)

            scheduler.advance_ms(game.settings.display_duration_answer_ms + 1)
            assert game.present_state_name == "fetchClue"
            await game.drain()
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "showClueCategoryAndValue"
        assert game.operator.rounds_played == 1
        assert game.teams[0].statistics.money_at_end_of_each_round == [200]
        assert game.teams[1].statistics.questions_not_buzzed == 1

    def test_slides_follow_states(self, scheduler):
        async def scenario():
            game = _game(scheduler)
            await _to_question(game, scheduler)
            return game

        game = asyncio.run(scenario())
        assert game.presentation.current_slide == "slide-clue-question"

    def test_nobody_buzzes(self, scheduler):
        async def scenario():
            game = _game(scheduler)
            await _to_question(game, scheduler)
            game.press_key(" ")
            scheduler.advance_ms(game.settings.timeout_wait_for_buzzes_ms + 1)
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "showAnswer"
        assert "questionTimeout" in game.audio.played

    def test_answer_timeout_counts_as_wrong(self, scheduler):
        async def scenario():
            game = _game(scheduler)
            await _to_question(game, scheduler)
            game.press_key(" ")
            game.press_key("2")
            lights = game.teams[1].countdown_lights
            assert lights.lit_count == 9
            scheduler.advance_ms(game.settings.timeout_wait_for_answer_ms + 1)
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "waitForBuzzes"
        assert game.teams[1].money == -100
        assert game.teams[1].state is TeamState.CAN_ANSWER
        assert game.teams[1].countdown_lights.lit_count == 0

    def test_wrong_answers_in_single_answer_mode_show_answer(self, scheduler):
        settings = Settings(team_count=2, allow_multiple_answers_to_same_question=False)

        async def scenario():
            game = _game(scheduler, settings=settings)
            await _to_question(game, scheduler)
            game.press_key(" ")
            game.press_key("1")
            game.press_key("n")
            assert game.present_state_name == "waitForBuzzes"
            assert game.press_key("1") is False
            game.press_key("2")
            game.press_key("n")
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "showAnswer"
        assert [t.money for t in game.teams] == [-100, -100]

    def test_skip_clue_fetches_another(self, scheduler):
        second = dict(CLUE, question="Second clue", value=400)

        async def scenario():
            game = _game(scheduler, source=_source(CLUE, second))
            await _to_question(game, scheduler)
            game.press_key("3")
            assert game.teams[2].state is TeamState.LOCKOUT
            game.trigger("skipClue")
            assert game.teams[2].state is TeamState.BUZZERS_OFF
            await game.drain()
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "showClueCategoryAndValue"
        assert game.operator.present_clue.value == 400


class TestGameEnd:
    def test_money_threshold_ends_game(self, scheduler):
        settings = Settings(team_count=2, team_money_when_game_should_end=200)
        console = MagicMock()

        async def scenario():
            game = _game(scheduler, settings=settings, console=console)
            await _to_question(game, scheduler)
            game.press_key(" ")
            game.press_key("2")
            game.press_key("y")
            scheduler.advance_ms(settings.display_duration_answer_ms + 1)
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "gameEnd"
        assert "musicClosing" in game.audio.played
        standings = console.show_message.call_args.args[0]
        assert standings.startswith("Final standings:")
        assert "1. Team 2: 200" in standings

        game.trigger("reset")
        assert game.present_state_name == "idle"
        assert all(t.money == 0 for t in game.teams)

    def test_time_limit_ends_game(self, scheduler):
        settings = Settings(team_count=2, game_time_limit_ms=1000)

        async def scenario():
            game = _game(scheduler, settings=settings)
            await _to_question(game, scheduler)
            game.press_key(" ")
            scheduler.advance_ms(settings.timeout_wait_for_buzzes_ms + 1)
            scheduler.advance_ms(settings.display_duration_answer_ms + 1)
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "gameEnd"

    def test_snapshot(self, scheduler):
        async def scenario():
            game = _game(scheduler)
            await _to_question(game, scheduler)
            return game

        game = asyncio.run(scenario())
        snapshot = game.snapshot()
        assert snapshot.state_name == "showClueQuestion"
        assert [t.name for t in snapshot.teams] == ["Team 1", "Team 2", "Team 3"]
        assert snapshot.elapsed_game_time_ms == pytest.approx(3001, abs=1)


class TestPause:
    def test_pause_freezes_everything(self, scheduler):
        async def scenario():
            game = _game(scheduler)
            await _to_question(game, scheduler)
            game.press_key(" ")
            scheduler.advance_ms(1000)

            game.set_paused(True)
            assert game.is_paused
            assert game.press_key("1") is False
            scheduler.advance_ms(60_000)
            assert game.present_state_name == "waitForBuzzes"

            game.set_paused(False)
            scheduler.advance_ms(3999)
            assert game.present_state_name == "waitForBuzzes"
            scheduler.advance_ms(2)
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "showAnswer"
        elapsed = game.operator.game_timer.elapsed_ms
        assert elapsed == pytest.approx(3001 + 5001, abs=2)

    def test_game_started_while_paused_keeps_clock_stopped(self, scheduler):
        async def scenario():
            game = _game(scheduler)
            game.start()
            game.set_paused(True)
            assert game.trigger("startGame") is True
            await game.drain()
            scheduler.advance_ms(60_000)

            game_timer = game.operator.game_timer
            assert game_timer.is_paused
            assert game_timer.elapsed_ms == pytest.approx(0, abs=1e-6)
            assert game.present_state_name == "showClueCategoryAndValue"

            game.set_paused(False)
            scheduler.advance_ms(1000)
            return game

        game = asyncio.run(scenario())
        assert game.operator.game_timer.elapsed_ms == pytest.approx(1000, abs=1e-6)
        assert game.present_state_name == "showClueCategoryAndValue"


class TestManualTriggers:
    def test_start_game_outside_idle_is_ignored(self, scheduler, caplog):
        async def scenario():
            game = _game(scheduler)
            await _to_question(game, scheduler)
            return game

        game = asyncio.run(scenario())
        game_timer = game.operator.game_timer
        with caplog.at_level("WARNING", logger="buzzer_quiz"):
            assert game.trigger("startGame") is False

        assert game.present_state_name == "showClueQuestion"
        assert game.operator.game_timer is game_timer
        assert "'startGame' has no eligible transition" in caplog.text


class TestFetchFailure:
    def test_clue_source_error_is_fatal(self, scheduler, capsys):
        console = MagicMock()

        async def broken():
            raise OSError("network unreachable")

        async def scenario():
            asyncio.get_running_loop().set_exception_handler(lambda loop, context: None)
            game = _game(scheduler, source=broken, console=console)
            game.start()
            game.trigger("startGame")
            with pytest.raises(PromiseTransitionError):
                await game.drain()
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "fetchClue"
        console.alert.assert_called_once()
        assert "network unreachable" in capsys.readouterr().err

    def test_invalid_clues_give_placeholder(self, scheduler):
        bad = {"category": "Music", "value": 200, "question": "The tune heard here", "answer": "x"}

        async def scenario():
            game = _game(scheduler, source=_source(bad))
            game.start()
            game.trigger("startGame")
            await game.drain()
            return game

        game = asyncio.run(scenario())
        assert game.present_state_name == "showClueCategoryAndValue"
        assert game.operator.present_clue.category == "error"
