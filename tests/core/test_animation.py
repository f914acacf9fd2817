"""Tests for koshi_tween.core.animation -- the playback controller.

Every test drives time through the manual clock fixture, so each frame is
explicit: clock.advance(ms) fires exactly one frame.
"""

import math
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import pytest

from koshi_tween.core import (
    Animation,
    AnimationCancelled,
    AnimationOptions,
    ConfigurationError,
    InvalidStateError,
    PlayState,
    SpringGenerator,
)


# ===================================================================
# Construction
# ===================================================================

class TestConstruction:

    def test_starts_running_with_one_frame_scheduled(self, make_animation, clock, recorder):
        anim = make_animation()
        assert anim.play_state is PlayState.RUNNING
        assert clock.pending == 1
        assert len(recorder) == 0

    def test_configuration_error_schedules_nothing(self, clock, recorder):
        with pytest.raises(ConfigurationError):
            Animation(recorder, [1.0], clock=clock)
        assert clock.pending == 0

    def test_accepts_options_object(self, clock, recorder):
        anim = Animation(recorder, (0, 10), AnimationOptions(duration=50, easing="linear"), clock=clock)
        assert anim.config.duration == 50.0

    def test_unknown_option_rejected(self, clock, recorder):
        with pytest.raises(ConfigurationError):
            Animation(recorder, (0, 1), {"loop": True}, clock=clock)


# ===================================================================
# Sampling
# ===================================================================

class TestSampling:

    def test_first_frame_is_first_keyframe(self, make_animation, clock, recorder):
        make_animation((3.0, 9.0), duration=1000, easing="linear")
        clock.advance(0.0)
        assert recorder.values == [pytest.approx(3.0)]

    def test_linear_halfway(self, make_animation, clock, recorder):
        make_animation((0.0, 1.0), duration=1000, easing="linear")
        clock.advance(0.0)
        clock.advance(500.0)
        assert recorder.last == pytest.approx(0.5)

    def test_outputs_in_timestamp_order(self, make_animation, clock, recorder):
        make_animation((0.0, 100.0), duration=1000, easing="linear")
        for _ in range(10):
            clock.advance(50.0)
        assert recorder.values == sorted(recorder.values)

    def test_delay_holds_first_keyframe(self, make_animation, clock, recorder):
        make_animation((0.0, 1.0), duration=1000, delay=500, easing="linear")
        clock.advance(400.0)
        assert recorder.last == 0.0
        clock.advance(350.0)
        assert recorder.last == pytest.approx(0.25)

    def test_alternate_repeat(self, make_animation, clock, recorder):
        make_animation((0.0, 1.0), duration=1000, repeat=1, direction="alternate", easing="linear")
        clock.advance(250.0)
        assert recorder.last == pytest.approx(0.25)
        clock.advance(1000.0)
        assert recorder.last == pytest.approx(0.75)

    def test_current_time_tracks_samples(self, make_animation, clock):
        anim = make_animation(duration=1000)
        clock.advance(120.0)
        assert anim.current_time == pytest.approx(120.0)


# ===================================================================
# Natural completion
# ===================================================================

class TestCompletion:

    def test_resolves_with_last_keyframe(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 8.0), duration=100, easing="ease-in-out")
        clock.run(16.0)
        assert anim.play_state is PlayState.FINISHED
        assert anim.finished.result() == pytest.approx(8.0)
        assert recorder.last == pytest.approx(8.0)
        assert clock.pending == 0

    @pytest.mark.parametrize("options", [
        {"direction": "reverse"},
        {"direction": "alternate", "repeat": 1},
    ])
    def test_backwards_direction_resolves_with_last_keyframe(self, make_animation, clock, options):
        anim = make_animation((0.0, 8.0), duration=100, easing="linear", **options)
        clock.run(16.0)
        assert anim.finished.result() == pytest.approx(8.0)

    def test_end_delay_postpones_completion(self, make_animation, clock):
        anim = make_animation(duration=100, end_delay=200)
        clock.advance(150.0)
        assert not anim.finished.done()
        clock.advance(150.0)
        assert anim.finished.done()

    def test_no_frames_after_finish(self, make_animation, clock, recorder):
        make_animation(duration=100)
        clock.run(50.0)
        delivered = len(recorder)
        clock.advance(50.0)
        assert len(recorder) == delivered

    def test_never_completes_without_frames(self, make_animation, clock):
        anim = make_animation(duration=100)
        # The clock never fires: nothing is sampled, nothing completes
        assert not anim.finished.done()
        assert anim.play_state is PlayState.RUNNING

    def test_infinite_repeat_keeps_running(self, make_animation, clock):
        anim = make_animation(duration=100, repeat=math.inf)
        assert clock.run(10.0, max_frames=500) == 500
        assert not anim.finished.done()

    def test_done_callback(self, make_animation, clock):
        anim = make_animation((0.0, 2.0), duration=100)
        seen = []
        anim.finished.add_done_callback(lambda c: seen.append(c.result()))
        clock.run(25.0)
        assert seen == [pytest.approx(2.0)]


# ===================================================================
# pause / play
# ===================================================================

class TestPause:

    def test_pause_stops_output(self, make_animation, clock, recorder):
        anim = make_animation(duration=1000, easing="linear")
        clock.advance(100.0)
        anim.pause()
        delivered = len(recorder)
        clock.advance(100.0)
        clock.advance(100.0)
        assert len(recorder) == delivered
        assert clock.pending == 0
        assert anim.play_state is PlayState.PAUSED

    def test_pause_twice_is_idempotent(self, make_animation, clock):
        anim = make_animation(duration=1000)
        clock.advance(100.0)
        anim.pause()
        first = anim._runtime.pause_time
        clock.advance(300.0)
        anim.pause()
        assert anim._runtime.pause_time == first
        assert anim.play_state is PlayState.PAUSED

    def test_resume_continues_from_pause(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 1.0), duration=1000, easing="linear")
        clock.advance(300.0)
        anim.pause()
        clock.advance(5000.0)
        anim.play()
        clock.advance(100.0)
        assert recorder.last == pytest.approx(0.4)

    def test_play_is_idempotent_while_running(self, make_animation, clock):
        anim = make_animation(duration=1000)
        anim.play()
        anim.play()
        assert clock.pending == 1

    def test_play_after_finish_is_ignored(self, make_animation, clock):
        anim = make_animation(duration=100)
        clock.run(50.0)
        anim.play()
        assert anim.play_state is PlayState.FINISHED
        assert clock.pending == 0


# ===================================================================
# finish
# ===================================================================

class TestFinish:

    def test_finish_delivers_final_value_synchronously(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 5.0), duration=1000, repeat=2, easing="linear")
        clock.advance(100.0)
        anim.finish()
        assert recorder.last == pytest.approx(5.0)
        assert anim.finished.result() == pytest.approx(5.0)
        assert anim.play_state is PlayState.FINISHED
        assert clock.pending == 0

    def test_finish_before_first_frame(self, make_animation, clock, recorder):
        anim = make_animation((1.0, 2.0), duration=1000)
        anim.finish()
        assert recorder.values == [pytest.approx(2.0)]

    def test_finish_while_paused(self, make_animation, clock):
        anim = make_animation((0.0, 3.0), duration=1000)
        clock.advance(10.0)
        anim.pause()
        anim.finish()
        assert anim.finished.result() == pytest.approx(3.0)

    def test_finish_endless_animation_raises(self, make_animation):
        anim = make_animation(duration=100, repeat=math.inf)
        with pytest.raises(InvalidStateError):
            anim.finish()

    def test_finish_twice(self, make_animation, recorder):
        anim = make_animation(duration=100)
        anim.finish()
        anim.finish()
        assert len(recorder) == 1


# ===================================================================
# cancel / commit
# ===================================================================

class TestCancel:

    def test_cancel_before_any_frame(self, make_animation, clock, recorder):
        anim = make_animation((4.0, 9.0), duration=1000)
        anim.cancel()
        assert recorder.values == [pytest.approx(4.0)]
        assert anim.finished.cancelled()
        with pytest.raises(AnimationCancelled):
            anim.finished.result()
        assert anim.play_state is PlayState.IDLE
        assert clock.pending == 0

    def test_cancel_mid_flight_restores_start(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 10.0), duration=1000, easing="linear")
        clock.advance(600.0)
        anim.cancel()
        assert recorder.last == pytest.approx(0.0)
        clock.advance(100.0)
        assert recorder.last == pytest.approx(0.0)

    def test_cancel_while_paused_restores_start(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 10.0), duration=1000, easing="linear")
        clock.advance(600.0)
        anim.pause()
        anim.cancel()
        assert recorder.last == pytest.approx(0.0)

    def test_cancel_after_finish_keeps_resolution(self, make_animation, clock):
        anim = make_animation((0.0, 1.0), duration=100)
        clock.run(50.0)
        anim.cancel()
        assert not anim.finished.cancelled()
        assert anim.finished.result() == pytest.approx(1.0)

    def test_cancel_twice_restores_once(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 10.0), duration=1000, easing="linear")
        clock.advance(300.0)
        anim.cancel()
        anim.cancel()
        assert recorder.values == [pytest.approx(3.0), pytest.approx(0.0)]
        assert anim.finished.cancelled()

    def test_commit_holds_value_on_cancel(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 10.0), duration=1000, easing="linear")
        clock.advance(400.0)
        anim.commit()
        clock.advance(200.0)
        anim.cancel()
        assert recorder.last == pytest.approx(4.0)

    def test_play_after_cancel_is_ignored(self, make_animation, clock):
        anim = make_animation()
        anim.cancel()
        anim.play()
        assert anim.play_state is PlayState.IDLE
        assert clock.pending == 0


# ===================================================================
# reverse / playback_rate / current_time
# ===================================================================

class TestRate:

    def test_reverse_runs_backwards_from_current_time(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 1.0), duration=1000, easing="linear")
        clock.advance(500.0)
        anim.reverse()
        assert anim.playback_rate == -1.0
        clock.advance(100.0)
        assert recorder.last == pytest.approx(0.4)
        clock.advance(100.0)
        assert recorder.last == pytest.approx(0.3)

    def test_rewound_animation_keeps_running_at_start(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 1.0), duration=1000, easing="linear")
        clock.advance(500.0)
        anim.reverse()
        clock.run(100.0, max_frames=10)
        assert recorder.last == pytest.approx(0.0)
        assert not anim.finished.done()
        assert anim.play_state is PlayState.RUNNING
        assert clock.pending == 1

    def test_rewind_then_replay_reaches_end(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 8.0), duration=100, easing="linear")
        clock.advance(50.0)
        anim.reverse()
        clock.advance(60.0)
        assert recorder.last == pytest.approx(0.0)
        anim.reverse()
        clock.run(16.0)
        assert anim.finished.result() == pytest.approx(8.0)

    def test_rate_change_is_continuous(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 1.0), duration=1000, easing="linear")
        clock.advance(200.0)
        anim.playback_rate = 2.0
        clock.advance(100.0)
        assert recorder.last == pytest.approx(0.4)

    def test_rate_zero_freezes(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 1.0), duration=1000, easing="linear")
        clock.advance(300.0)
        anim.playback_rate = 0.0
        clock.advance(200.0)
        assert recorder.last == pytest.approx(0.3)
        anim.playback_rate = 1.0
        clock.advance(100.0)
        assert recorder.last == pytest.approx(0.4)

    def test_seek_while_running(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 1.0), duration=1000, easing="linear")
        clock.advance(100.0)
        anim.current_time = 700.0
        clock.advance(50.0)
        assert recorder.last == pytest.approx(0.75)

    def test_seek_round_trip_while_paused(self, make_animation, clock):
        anim = make_animation(duration=1000)
        clock.advance(100.0)
        anim.pause()
        anim.current_time = 640.0
        assert anim.current_time == pytest.approx(640.0)

    def test_seek_round_trip_at_rate_zero(self, make_animation, clock):
        anim = make_animation(duration=1000)
        anim.playback_rate = 0.0
        anim.current_time = 250.0
        assert anim.current_time == pytest.approx(250.0)
        clock.advance(500.0)
        assert anim.current_time == pytest.approx(250.0)

    def test_seek_while_paused_resumes_from_seek(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 1.0), duration=1000, easing="linear")
        clock.advance(100.0)
        anim.pause()
        anim.current_time = 800.0
        anim.play()
        clock.advance(100.0)
        assert recorder.last == pytest.approx(0.9)

    def test_rate_change_while_paused(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 1.0), duration=1000, easing="linear")
        clock.advance(200.0)
        anim.pause()
        anim.playback_rate = 2.0
        anim.play()
        clock.advance(100.0)
        assert recorder.last == pytest.approx(0.4)


# ===================================================================
# Easing generators end to end
# ===================================================================

class TestSpringAnimation:

    def test_spring_drives_duration_and_settles_on_target(self, make_animation, clock, recorder):
        anim = make_animation((0.0, 100.0), easing=SpringGenerator(), duration=5)
        assert anim.config.duration > 5
        clock.run(16.0)
        assert anim.finished.result() == pytest.approx(100.0)
        assert max(recorder.values) > 100.0
