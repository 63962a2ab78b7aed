# Area: Timer Tests
"""Tests for countdown display sinks."""

from unittest.mock import MagicMock

import pytest

from buzzer_quiz._timer import CountdownLights, ProgressBar, TextReadout, format_remaining


class TestFormatRemaining:
    """Text formatting of remaining time."""

    def test_tenths_under_a_minute(self):
        assert format_remaining(4200) == "4.2 sec"

    def test_minutes_and_seconds_over_a_minute(self):
        assert format_remaining(65_000) == "1 min 5 sec"

    def test_negative_clamped(self):
        assert format_remaining(-5) == "0.0 sec"


class TestTextReadout:
    def test_shows_done_on_finish(self, scheduler, timer_factory):
        readout = TextReadout()
        timer = timer_factory.create(1000)
        timer.add_observer(readout)
        timer.start()
        assert readout.text == "1.0 sec"
        scheduler.advance_ms(1100)
        assert readout.text == "Done"

    def test_on_change_called_only_for_new_text(self, scheduler, timer_factory):
        changes = []
        readout = TextReadout(on_change=changes.append)
        timer = timer_factory.create(1000)
        timer.add_observer(readout)
        timer.start()
        scheduler.advance_ms(1100)
        assert len(changes) == len(set(changes))
        assert changes[-1] == "Done"

    def test_paused_flag(self, scheduler, timer_factory):
        readout = TextReadout()
        timer = timer_factory.create(1000)
        timer.add_observer(readout)
        timer.start()
        timer.pause()
        assert readout.paused is True
        timer.resume()
        assert readout.paused is False


class TestProgressBar:
    def test_tracks_remaining(self, scheduler, timer_factory):
        bar = ProgressBar()
        timer = timer_factory.create(1000)
        timer.add_observer(bar)
        timer.start()
        assert bar.maximum == 1000
        assert bar.fraction == pytest.approx(1.0)

        scheduler.advance_ms(500)
        timer.pause()
        assert bar.value == pytest.approx(500, abs=1e-6)
        assert bar.paused is True

    def test_hide_on_finish(self, scheduler, timer_factory):
        bar = ProgressBar(hide_on_finish=True)
        timer = timer_factory.create(100)
        timer.add_observer(bar)
        timer.start()
        assert bar.visible
        scheduler.advance_ms(200)
        assert not bar.visible
        assert bar.value == 0


class TestCountdownLights:
    """Nine lights counting down the last five seconds."""

    def test_threshold(self):
        assert CountdownLights.threshold_for(5000) == 6
        assert CountdownLights.threshold_for(4999) == 6
        assert CountdownLights.threshold_for(4000) == 5
        assert CountdownLights.threshold_for(1) == 2
        assert CountdownLights.threshold_for(0) == 1

    def test_all_lit_at_start_without_tick(self, timer_factory):
        audio = MagicMock()
        lights = CountdownLights(audio)
        timer = timer_factory.create(5000)
        timer.add_observer(lights)
        timer.start()
        assert lights.lit_count == 9
        audio.play.assert_not_called()

    def test_outer_lights_go_out_first(self, scheduler, timer_factory):
        lights = CountdownLights()
        timer = timer_factory.create(5000)
        timer.add_observer(lights)
        timer.start()

        scheduler.advance_ms(1050)
        # Both lights numbered 5 are off
        assert lights.lit == [False, True, True, True, True, True, True, True, False]

        scheduler.advance_ms(3000)
        # Only the middle light numbered 1 remains
        assert lights.lit_count == 1
        assert lights.lit[4] is True

    def test_tick_cue_per_boundary_and_all_off_at_finish(self, scheduler, timer_factory):
        audio = MagicMock()
        lights = CountdownLights(audio)
        timer = timer_factory.create(5000)
        timer.add_observer(lights)
        timer.start()

        scheduler.advance_ms(5100)
        assert lights.lit_count == 0
        # Boundaries at 4, 3, 2 and 1 second remaining
        assert audio.play.call_count == 4
        audio.play.assert_called_with("tick")
