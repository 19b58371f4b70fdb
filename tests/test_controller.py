"""
Unit tests for the FlipController state machine.

Tests verify:
- Eager resting frame at construction
- The documented vertical-flip scenario
- Dropped (not queued) flip requests while animating
- Parity of visible face over repeated flips
- Change-only publication and frame consistency
- Tick argument validation
"""

import numpy as np
import pytest
from flip_animation import (
    DEFAULT_FRAME_DT,
    Axis,
    BackFaceMode,
    FlipConfig,
    FlipController,
    FlipFrame,
    FrameChannel,
    Orientation,
    RotationSense,
    build_transforms,
    is_front_visible,
    run_flip,
)

SCENARIO = FlipConfig(
    axis=Axis.VERTICAL,
    duration=0.5,
    initial_orientation=Orientation.FRONT,
    time_for_first_part=0.2,
    process_for_first_part=0.75,
)


class TestConstruction:
    """Tests for the initial resting frame"""

    def test_front_frame_before_any_tick(self):
        """A front-resting panel publishes angle 0 before any tick"""
        controller = FlipController(SCENARIO)
        frame = controller.frame
        assert frame is not None
        assert frame.is_front_visible is True
        assert frame.angle == 0.0
        assert controller.is_animating is False

    def test_back_frame_before_any_tick(self):
        """A back-resting panel starts half a turn round with the back showing"""
        controller = FlipController(SCENARIO.replace(initial_orientation=Orientation.BACK))
        frame = controller.frame
        assert frame.is_front_visible is False
        assert np.isclose(abs(frame.angle), np.pi)
        assert np.isclose(controller.angle_offset, np.pi)
        assert controller.orientation is Orientation.BACK

    def test_default_config(self):
        """Omitting the config uses FlipConfig defaults"""
        controller = FlipController()
        assert controller.config == FlipConfig()

    def test_state_is_a_copy(self):
        """Editing the returned state leaves the controller untouched"""
        controller = FlipController(SCENARIO)
        snapshot = controller.state
        snapshot.animating = True
        assert controller.is_animating is False


class TestScenario:
    """Vertical flip from the front with the default two-phase curve"""

    def test_fast_phase(self):
        """Progress 0.1 is 37.5% of the half turn, front still showing"""
        controller = FlipController(SCENARIO)
        controller.flip()
        controller.set_progress(0.1)

        frame = controller.frame
        assert np.isclose(frame.angle, -0.375 * np.pi)
        assert frame.is_front_visible is True
        assert controller.is_animating is True

    def test_completion(self):
        """Progress 1 ends at -pi on the back and resolves the future"""
        controller = FlipController(SCENARIO)
        future = controller.flip()
        controller.set_progress(0.1)
        controller.set_progress(1.0)

        frame = controller.frame
        assert np.isclose(frame.angle, -np.pi)
        assert frame.is_front_visible is False
        assert future.done()
        assert future.result() is Orientation.BACK
        assert controller.is_animating is False
        assert controller.orientation is Orientation.BACK
        assert np.isclose(controller.angle_offset, np.pi)

    def test_advance_uses_duration(self):
        """advance(dt) moves progress by dt / duration"""
        controller = FlipController(SCENARIO)
        controller.flip()
        controller.advance(0.125)
        assert np.isclose(controller.progress, 0.25)

    def test_advance_overshoot_completes(self):
        """A tick longer than the flip clips progress to 1 and finishes"""
        controller = FlipController(SCENARIO)
        future = controller.flip()
        controller.advance(10.0)
        assert future.done()
        assert controller.progress == 1.0

    def test_frame_rate_ticks_finish_on_time(self):
        """A 0.5 s flip at 60 Hz resolves on exactly the 30th tick"""
        controller = FlipController(SCENARIO)
        future = controller.flip()
        for _ in range(29):
            controller.advance(DEFAULT_FRAME_DT)
        assert not future.done()
        controller.advance(DEFAULT_FRAME_DT)
        assert future.done()
        assert controller.frame.progress == 1.0

    @pytest.mark.parametrize("duration, dt, expected", [
        (0.5, 1.0 / 60.0, 30),
        (0.3, 1.0 / 60.0, 18),
        (1.0, 0.1, 10),
        (0.5, 1.0 / 120.0, 60),
    ])
    def test_tick_count_matches_duration(self, duration, dt, expected):
        """duration / dt ticks complete a flip despite rounding in the sum"""
        controller = FlipController(SCENARIO.replace(duration=duration))
        assert run_flip(controller, dt=dt) == expected

    def test_two_flips_restore_front(self):
        """Two flips bring the front back with the offset at 0 mod 2pi"""
        controller = FlipController(SCENARIO)
        run_flip(controller)
        run_flip(controller)
        assert controller.orientation is Orientation.FRONT
        assert controller.frame.is_front_visible is True
        assert np.isclose(np.mod(controller.angle_offset, 2 * np.pi), 0.0)


class TestReentrancy:
    """Tests for flip() while a flip is in flight"""

    def test_second_call_returns_same_future(self):
        """flip() during a flip hands back the in-flight future"""
        controller = FlipController(SCENARIO)
        first = controller.flip()
        second = controller.flip()
        assert first is second

    def test_rapid_calls_make_one_transition(self):
        """Two quick flip() calls toggle the face only once"""
        controller = FlipController(SCENARIO)
        controller.flip()
        controller.flip()
        while controller.is_animating:
            controller.advance(1.0 / 60.0)
        assert controller.orientation is Orientation.BACK
        assert controller.is_animating is False

    def test_mid_flip_call_does_not_restart(self):
        """flip() halfway through keeps the current progress"""
        controller = FlipController(SCENARIO)
        controller.flip()
        controller.set_progress(0.4)
        controller.flip()
        assert controller.progress == 0.4

    def test_future_cannot_be_cancelled(self):
        """cancel() is refused and the flip still completes"""
        controller = FlipController(SCENARIO)
        future = controller.flip()
        assert future.cancel() is False
        run_flip(controller)
        assert future.result() is Orientation.BACK

    def test_done_callback_may_flip_again(self):
        """The controller is idle when completion callbacks run"""
        controller = FlipController(SCENARIO)
        future = controller.flip()
        future.add_done_callback(lambda _f: controller.flip())
        controller.set_progress(1.0)
        assert controller.is_animating is True
        assert controller.orientation is Orientation.BACK

    def test_done_callback_sees_resting_frame(self):
        """The published frame already matches the resting state on completion"""
        controller = FlipController(SCENARIO.replace(rotation_sense=RotationSense.CONTINUOUS))
        run_flip(controller)
        seen = []
        future = controller.flip()
        future.add_done_callback(lambda _f: seen.append((controller.frame.angle, controller.angle)))
        run_flip(controller)
        assert len(seen) == 1
        assert np.isclose(seen[0][0], seen[0][1])


class TestRepeatedFlips:
    """Visible face parity over consecutive flips"""

    @pytest.mark.parametrize("sense", list(RotationSense))
    @pytest.mark.parametrize("axis", list(Axis))
    def test_parity(self, sense, axis):
        """Odd flip counts show the other face, even counts the original"""
        controller = FlipController(SCENARIO.replace(rotation_sense=sense, axis=axis))
        initial = controller.frame.is_front_visible
        for n in range(1, 7):
            run_flip(controller)
            expected = initial if n % 2 == 0 else not initial
            assert controller.frame.is_front_visible is expected, \
                f"Wrong face after {n} flips ({sense.value}, {axis.value})"

    def test_parity_from_back(self):
        """Starting on the back, odd flip counts show the front"""
        controller = FlipController(SCENARIO.replace(initial_orientation="back"))
        for n in range(1, 5):
            run_flip(controller)
            assert controller.frame.is_front_visible is (n % 2 == 1)

    def test_continuous_winds_past_half_turn(self):
        """The second continuous flip passes -pi, then rests at angle 0"""
        controller = FlipController(SCENARIO.replace(rotation_sense=RotationSense.CONTINUOUS))
        run_flip(controller)
        controller.flip()
        controller.set_progress(0.5)
        assert controller.angle < -np.pi
        controller.set_progress(1.0)
        assert controller.angle_offset == 0.0
        assert controller.frame.angle == controller.angle
        assert np.isclose(controller.frame.angle, 0.0)
        assert controller.frame.is_front_visible is True

    @pytest.mark.parametrize("sense", list(RotationSense))
    def test_frame_matches_state_after_each_flip(self, sense):
        """After every flip the published frame is the resting frame"""
        config = SCENARIO.replace(rotation_sense=sense)
        controller = FlipController(config)
        for _ in range(4):
            run_flip(controller)
            current, opposite = build_transforms(controller.angle, config.axis,
                                                 config.perspective, config.back_face)
            assert np.isclose(controller.frame.angle, controller.angle)
            assert np.allclose(controller.frame.current_transform, current)
            assert np.allclose(controller.frame.opposite_transform, opposite)

    def test_alternate_returns_through_same_path(self):
        """The second flip retraces the first in reverse"""
        controller = FlipController(SCENARIO)
        first, second = [], []
        run_flip(controller, dt=0.05, on_tick=lambda c: first.append(c.frame.angle))
        run_flip(controller, dt=0.05, on_tick=lambda c: second.append(c.frame.angle))
        assert min(first) >= -np.pi and max(second) <= 0.0
        assert np.isclose(first[-1], -np.pi)
        assert np.isclose(second[-1], 0.0)


class TestPublication:
    """Tests for change-only frame publication"""

    def test_replay_delivers_current_frame(self):
        """replay=True hands a new subscriber the current frame"""
        controller = FlipController(SCENARIO)
        received = []
        controller.subscribe(received.append, replay=True)
        assert received == [controller.frame]

    def test_start_without_movement_is_not_published(self):
        """Progress 0 looks exactly like the resting frame"""
        controller = FlipController(SCENARIO)
        received = []
        controller.subscribe(received.append)
        controller.flip()
        assert received == []

    def test_repeated_progress_is_not_republished(self):
        """Setting the same progress twice publishes once"""
        controller = FlipController(SCENARIO)
        received = []
        controller.subscribe(received.append)
        controller.flip()
        controller.set_progress(0.3)
        controller.set_progress(0.3)
        assert len(received) == 1

    def test_unsubscribe(self):
        """An unsubscribed callback receives no further frames"""
        controller = FlipController(SCENARIO)
        received = []
        unsubscribe = controller.subscribe(received.append)
        controller.flip()
        controller.set_progress(0.3)
        unsubscribe()
        controller.set_progress(0.6)
        assert len(received) == 1

    def test_frames_are_consistent_and_ordered(self):
        """Each frame's transforms and flag derive from its own angle"""
        config = SCENARIO.replace(axis=Axis.HORIZONTAL, back_face=BackFaceMode.PINNED)
        controller = FlipController(config)
        received = []
        controller.subscribe(received.append)
        run_flip(controller, dt=1.0 / 120.0)

        assert len(received) > 10
        progress = [f.progress for f in received]
        assert np.all(np.diff(progress) >= 0.0)
        for frame in received:
            current, opposite = build_transforms(frame.angle, config.axis,
                                                 config.perspective, config.back_face)
            assert np.allclose(frame.current_transform, current)
            assert np.allclose(frame.opposite_transform, opposite)
            assert frame.is_front_visible == is_front_visible(frame.angle)

    def test_visibility_switches_once_per_flip(self):
        """The visible face changes exactly once during a flip"""
        controller = FlipController(SCENARIO)
        flags = []
        controller.subscribe(lambda f: flags.append(f.is_front_visible))
        run_flip(controller)
        switches = np.count_nonzero(np.diff(np.array(flags, dtype=int)))
        assert switches == 1

    def test_continuous_wrap_is_published(self):
        """Resting after -2pi publishes the wrapped angle-0 frame"""
        controller = FlipController(SCENARIO.replace(rotation_sense=RotationSense.CONTINUOUS))
        run_flip(controller)
        received = []
        controller.subscribe(received.append)
        run_flip(controller)
        assert np.isclose(received[-1].angle, 0.0)
        assert received[-1] is controller.frame


class TestTicks:
    """Tests for tick argument handling"""

    def test_ticks_ignored_when_idle(self):
        """advance and set_progress return False and do nothing when idle"""
        controller = FlipController(SCENARIO)
        assert controller.advance(0.1) is False
        assert controller.set_progress(0.5) is False
        assert controller.progress == 0.0

    def test_negative_dt_raises(self):
        """A negative dt is rejected"""
        controller = FlipController(SCENARIO)
        controller.flip()
        with pytest.raises(ValueError):
            controller.advance(-0.01)

    @pytest.mark.parametrize("progress", [-0.1, 1.1, float("nan")])
    def test_progress_out_of_range_raises(self, progress):
        """Progress outside [0, 1] is rejected"""
        controller = FlipController(SCENARIO)
        controller.flip()
        with pytest.raises(ValueError):
            controller.set_progress(progress)

    def test_backwards_progress_raises(self):
        """Progress cannot decrease within a flip"""
        controller = FlipController(SCENARIO)
        controller.flip()
        controller.set_progress(0.5)
        with pytest.raises(ValueError, match="backwards"):
            controller.set_progress(0.4)

    def test_short_of_end_is_not_snapped(self):
        """Progress visibly below 1 keeps the flip running"""
        controller = FlipController(SCENARIO)
        controller.flip()
        controller.advance(0.4999)
        assert controller.is_animating is True
        assert controller.progress < 1.0


class TestTap:
    """Tests for handle_tap()"""

    def test_tap_disabled_by_default(self):
        """Taps do nothing unless flip_on_tap is set"""
        controller = FlipController(SCENARIO)
        assert controller.handle_tap() is None
        assert controller.is_animating is False

    def test_tap_flips_when_enabled(self):
        """With flip_on_tap a tap starts a flip and repeats share its future"""
        controller = FlipController(SCENARIO.replace(flip_on_tap=True))
        future = controller.handle_tap()
        assert future is not None
        assert controller.is_animating is True
        assert controller.handle_tap() is future


class TestFrameChannel:
    """Tests for FrameChannel used directly"""

    @staticmethod
    def _frame(angle):
        current, opposite = build_transforms(angle, Axis.VERTICAL)
        return FlipFrame(current, opposite, is_front_visible(angle), angle, 0.0)

    def test_identical_frame_is_not_published(self):
        """A frame identical to the current one is dropped"""
        channel = FrameChannel()
        assert channel.publish(self._frame(0.4)) is True
        assert channel.publish(self._frame(0.4)) is False
        assert channel.publish_count == 1

    def test_changed_frame_is_published(self):
        """A different frame replaces the current value"""
        channel = FrameChannel(self._frame(0.4))
        assert channel.publish(self._frame(0.5)) is True
        assert np.isclose(channel.value.angle, 0.5)

    def test_subscribers_called_in_order(self):
        """Subscribers run in subscription order"""
        channel = FrameChannel()
        calls = []
        channel.subscribe(lambda f: calls.append("a"))
        channel.subscribe(lambda f: calls.append("b"))
        channel.publish(self._frame(0.1))
        assert calls == ["a", "b"]

    def test_callback_may_unsubscribe_itself(self):
        """Unsubscribing inside a callback stops later deliveries"""
        channel = FrameChannel()
        calls = []

        def once(frame):
            calls.append(frame.angle)
            unsubscribe()

        unsubscribe = channel.subscribe(once)
        channel.publish(self._frame(0.1))
        channel.publish(self._frame(0.2))
        assert calls == [0.1]

    def test_non_callable_subscriber_raises(self):
        """Subscribing something that is not callable is rejected"""
        with pytest.raises(ValueError):
            FrameChannel().subscribe("not a function")
