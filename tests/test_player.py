"""
Tests for macro playback scheduling and dispatch.
"""

import pytest

from macrokit.errors import KeyMappingError, SynthesisError, SynthesizerInitError
from macrokit.models import Macro, MouseButton, PlaybackSettings, UnrecognizedEvent
from macrokit.models.events import key_down, key_up, mouse_down, mouse_move, mouse_up, mouse_wheel
from macrokit.playback.player import CancellationToken, Player, scaled_delay
from macrokit.playback.synthesizer import PynputSynthesizer

from fakes import FakeSynthesizer, RecordingToken


def _macro(events, **playback) -> Macro:
    return Macro(name="test", events=events, playback_settings=PlaybackSettings(**playback))


TWO_EVENTS = [mouse_move(10, 20, 0), mouse_down(MouseButton.LEFT, 100)]


class TestScaledDelay:
    """Tests for the speed-scaled wait."""

    @pytest.mark.parametrize("previous,current,speed,expected", [
        (0, 100, 1.0, 100),
        (0, 100, 2.0, 50),
        (0, 7, 2.0, 3),
        (0, 100, 0.5, 200),
        (0, 100, 3.0, 33),
        (50, 50, 1.0, 0),
        (100, 50, 1.0, 0),
    ])
    def test_floor_division(self, previous, current, speed, expected):
        assert scaled_delay(previous, current, speed) == expected


class TestTiming:
    """Tests for waits between events and iterations."""

    def test_empty_macro(self, synth, token):
        """Test that an empty macro succeeds without synthesizing anything."""
        report = Player(synthesizer=synth).play(_macro([]), cancel=token)

        assert synth.calls == []
        assert token.waits == []
        assert report.iterations == 0

    def test_double_speed(self, synth, token):
        """Test that a 100ms gap at 2x becomes a 50ms wait."""
        Player(synthesizer=synth).play(_macro(TWO_EVENTS, speed=2.0), cancel=token)

        assert token.waits == [0.05]
        assert synth.calls == [("move", 10, 20), ("button", MouseButton.LEFT, True)]

    def test_first_event_immediate(self, synth, token):
        """Test that no wait precedes the first event even if it is late."""
        events = [key_down("a", 300), key_up("a", 400)]
        Player(synthesizer=synth).play(_macro(events), cancel=token)
        assert token.waits == [0.1]

    def test_count_mode(self, synth, token):
        """Test 3 repetitions of 2 events with settle gaps only between them."""
        report = Player(synthesizer=synth).play(
            _macro(TWO_EVENTS, repeat_mode="count", repeat_count=3), cancel=token
        )

        assert len(synth.calls) == 6
        assert token.waits == [0.1, 0.5, 0.1, 0.5, 0.1]
        assert report.iterations == 3
        assert report.events_synthesized == 6
        assert report.cancelled is False

    def test_once_ignores_repeat_count(self, synth, token):
        report = Player(synthesizer=synth).play(
            _macro(TWO_EVENTS, repeat_mode="once", repeat_count=5), cancel=token
        )
        assert len(synth.calls) == 2
        assert report.iterations == 1

    def test_count_zero(self, synth, token):
        report = Player(synthesizer=synth).play(
            _macro(TWO_EVENTS, repeat_mode="count", repeat_count=0), cancel=token
        )
        assert synth.calls == []
        assert report.iterations == 0

    def test_macro_interval_overrides_settle(self, synth, token):
        Player(synthesizer=synth).play(
            _macro(TWO_EVENTS, repeat_mode="count", repeat_count=2, interval=250), cancel=token
        )
        assert token.waits == [0.1, 0.25, 0.1]

    def test_configured_settle_interval(self, synth, token):
        Player(synthesizer=synth, settle_interval_ms=0).play(
            _macro(TWO_EVENTS, repeat_mode="count", repeat_count=2), cancel=token
        )
        assert token.waits == [0.1, 0.1]

    def test_real_wait_is_scaled(self, synth):
        """Test the wall-clock wait with a real token."""
        import time

        events = [mouse_move(0, 0, 0), mouse_move(1, 1, 100)]
        started = time.monotonic()
        Player(synthesizer=synth).play(_macro(events, speed=2.0))
        elapsed = time.monotonic() - started

        assert 0.04 <= elapsed < 0.5


class TestCancellation:
    """Tests for stopping playback."""

    def test_infinite_stops_on_cancel(self, synth):
        """Test that an infinite macro ends once the token is cancelled."""
        token = RecordingToken(limit=4)
        report = Player(synthesizer=synth).play(_macro(TWO_EVENTS, repeat_mode="infinite"), cancel=token)

        assert token.waits == [0.1, 0.5, 0.1, 0.5]
        assert report.cancelled is True
        assert report.iterations == 2
        assert len(synth.calls) == 4

    def test_cancel_mid_iteration(self, synth):
        token = RecordingToken(limit=1)
        report = Player(synthesizer=synth).play(_macro(TWO_EVENTS), cancel=token)

        assert synth.calls == [("move", 10, 20)]
        assert report.cancelled is True
        assert report.iterations == 0

    def test_cancelled_before_start(self, synth):
        token = CancellationToken()
        token.cancel()
        report = Player(synthesizer=synth).play(_macro(TWO_EVENTS), cancel=token)

        assert synth.calls == []
        assert report.cancelled is True

    def test_real_token_wakes_early(self):
        import threading
        import time

        token = CancellationToken()
        threading.Timer(0.05, token.cancel).start()

        started = time.monotonic()
        assert token.wait(5.0) is True
        assert time.monotonic() - started < 2.0


class TestDispatch:
    """Tests for event-to-synthesis dispatch."""

    def test_all_kinds(self, synth, token):
        events = [
            mouse_move(5, 6, 0),
            mouse_down(MouseButton.RIGHT, 0),
            mouse_up(MouseButton.RIGHT, 0),
            mouse_wheel(4, -3, 0),
            key_down("Enter", 0),
            key_up("Enter", 0),
        ]
        Player(synthesizer=synth).play(_macro(events), cancel=token)

        assert synth.calls == [
            ("move", 5, 6),
            ("button", MouseButton.RIGHT, True),
            ("button", MouseButton.RIGHT, False),
            ("scroll", -3, "vertical"),
            ("key", "Enter", True),
            ("key", "Enter", False),
        ]

    def test_character_keys_keep_direction(self, synth, token):
        events = [key_down("a", 0), key_up("a", 10)]
        Player(synthesizer=synth).play(_macro(events), cancel=token)
        assert synth.calls == [("key", "a", True), ("key", "a", False)]

    def test_unknown_kind_skipped(self, synth, token):
        """Test that an unrecognized event is logged and skipped."""
        events = [
            mouse_move(1, 1, 0),
            UnrecognizedEvent(type="Gesture", timestamp=50, data={"fingers": 3}),
            mouse_move(2, 2, 100),
        ]
        report = Player(synthesizer=synth).play(_macro(events), cancel=token)

        assert synth.calls == [("move", 1, 1), ("move", 2, 2)]
        assert report.skipped == 1
        assert report.events_synthesized == 2
        assert token.waits == [0.05, 0.05]

    def test_unmapped_key_aborts(self, synth, token):
        """Test that the default policy raises and stops playback."""
        events = [key_down("a", 0), key_down("media_play_pause", 10), key_up("a", 20)]

        with pytest.raises(KeyMappingError) as exc_info:
            Player(synthesizer=synth).play(_macro(events), cancel=token)

        assert exc_info.value.key == "media_play_pause"
        assert synth.calls == [("key", "a", True)]

    def test_unmapped_key_skip_policy(self, synth, token):
        events = [key_down("a", 0), key_down("media_play_pause", 10), key_up("a", 20)]
        report = Player(synthesizer=synth, unmapped_keys="skip").play(_macro(events), cancel=token)

        assert synth.calls == [("key", "a", True), ("key", "a", False)]
        assert report.skipped == 1

    def test_invalid_policy(self, synth):
        with pytest.raises(ValueError):
            Player(synthesizer=synth, unmapped_keys="guess")

    def test_synthesis_error_aborts(self, token):
        """Test that a failed injection stops the rest and is not undone."""
        synth = FakeSynthesizer(fail_on_call=2)
        events = [mouse_move(1, 1, 0), mouse_move(2, 2, 10), mouse_move(3, 3, 20)]

        with pytest.raises(SynthesisError) as exc_info:
            Player(synthesizer=synth).play(_macro(events, repeat_mode="infinite"), cancel=token)

        assert exc_info.value.kind == "SynthesisError"
        assert synth.calls == [("move", 1, 1)]

    def test_missing_backend(self, monkeypatch, token):
        """Test that a failing backend surfaces as SynthesizerInitError."""
        def broken_init(self):
            raise SynthesizerInitError("Failed to create input controllers: no display")

        monkeypatch.setattr(PynputSynthesizer, "__init__", broken_init)

        with pytest.raises(SynthesizerInitError):
            Player().play(_macro(TWO_EVENTS), cancel=token)
        assert token.waits == []
