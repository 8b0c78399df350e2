import unittest

from pomodoro import IdlePauseConfig, InteractionGate, Phase, SessionClock, SessionConfig
from runtime.scheduler import CallbackScheduler


class _ManualTime:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _NullDisplay:
    def render(self, text: str, emphasis: str) -> None:
        pass


class _RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str, duration_ms: int) -> None:
        self.messages.append(message)


def _idle_config(**overrides) -> SessionConfig:
    values = {
        "work_duration": 1500,
        "short_rest_duration": 300,
        "idle_pause": IdlePauseConfig(enabled=True, timeout_seconds=60),
    }
    values.update(overrides)
    return SessionConfig(**values)


class InteractionGateTestCase(unittest.TestCase):
    def build(self, config: SessionConfig) -> InteractionGate:
        self.time = _ManualTime()
        self.scheduler = CallbackScheduler(clock=self.time)
        self.notifier = _RecordingNotifier()
        self.clock = SessionClock(
            config,
            scheduler=self.scheduler,
            display=_NullDisplay(),
        )
        self.singles: list[float] = []
        self.doubles: list[float] = []
        self.gate = InteractionGate(
            self.clock,
            scheduler=self.scheduler,
            on_single=lambda: self.singles.append(self.time.now),
            on_double=lambda: self.doubles.append(self.time.now),
            notifier=self.notifier,
        )
        return self.gate

    def advance(self, seconds: float) -> None:
        self.time.now += seconds
        self.scheduler.run_pending()

    def advance_seconds(self, seconds: int) -> None:
        for _ in range(seconds):
            self.advance(1.0)


class ActivationDisambiguationTests(InteractionGateTestCase):
    def test_single_activation_fires_after_window(self) -> None:
        gate = self.build(SessionConfig())

        gate.on_activation()
        self.advance(0.1)
        self.assertEqual([], self.singles)
        self.assertTrue(gate.activation_pending)

        self.advance(0.2)

        self.assertEqual(1, len(self.singles))
        self.assertEqual([], self.doubles)
        self.assertFalse(gate.activation_pending)

    def test_two_activations_within_window_fire_one_double(self) -> None:
        gate = self.build(SessionConfig())

        gate.on_activation()
        self.advance(0.1)
        gate.on_activation()

        self.assertEqual([0.1], self.doubles)
        self.advance(1.0)
        self.assertEqual([], self.singles)
        self.assertEqual(1, len(self.doubles))

    def test_activations_outside_window_fire_two_singles(self) -> None:
        gate = self.build(SessionConfig())

        gate.on_activation()
        self.advance(0.5)
        gate.on_activation()
        self.advance(0.5)

        self.assertEqual(2, len(self.singles))
        self.assertEqual([], self.doubles)

    def test_dispose_cancels_pending_activation(self) -> None:
        gate = self.build(SessionConfig())

        gate.on_activation()
        gate.dispose()
        self.advance(1.0)

        self.assertEqual([], self.singles)


class IdleTrackingTests(InteractionGateTestCase):
    def test_start_arms_idle_tracking(self) -> None:
        gate = self.build(_idle_config())
        self.assertFalse(gate.idle_armed)

        self.clock.start()

        self.assertTrue(gate.idle_armed)

    def test_inactivity_pauses_work_exactly_once(self) -> None:
        gate = self.build(_idle_config())
        self.clock.start()

        self.advance_seconds(59)
        self.assertTrue(self.clock.running)

        self.advance_seconds(1)
        self.assertFalse(self.clock.running)
        self.assertTrue(self.clock.paused_by_idle)
        self.assertFalse(gate.idle_armed)
        self.assertEqual(1441, self.clock.remaining_seconds)

        self.advance_seconds(120)
        self.assertEqual(["Pomodoro paused due to inactivity."], self.notifier.messages)

    def test_activity_defers_idle_deadline(self) -> None:
        gate = self.build(_idle_config())
        self.clock.start()

        self.advance_seconds(50)
        gate.on_activity()
        gate.on_activity()
        gate.on_activity()
        self.assertEqual(2, self.scheduler.pending_count)

        self.advance_seconds(59)
        self.assertTrue(self.clock.running)
        self.advance_seconds(1)
        self.assertTrue(self.clock.paused_by_idle)

    def test_activity_resumes_idle_paused_clock(self) -> None:
        gate = self.build(_idle_config())
        self.clock.start()
        self.advance_seconds(60)

        gate.on_activity()

        self.assertTrue(self.clock.running)
        self.assertFalse(self.clock.paused_by_idle)
        self.assertTrue(gate.idle_armed)
        self.assertEqual("Pomodoro timer resumed.", self.notifier.messages[-1])

    def test_activity_does_not_resume_manual_pause(self) -> None:
        gate = self.build(_idle_config())
        self.clock.start()
        self.clock.pause()

        gate.on_activity()

        self.assertFalse(self.clock.running)
        self.assertFalse(gate.idle_armed)

    def test_idle_tracking_disarmed_during_rest(self) -> None:
        gate = self.build(_idle_config(work_duration=30))
        self.clock.start()

        self.advance_seconds(30)
        self.assertIs(Phase.SHORT_REST, self.clock.phase)
        self.assertFalse(gate.idle_armed)

        gate.on_activity()
        self.assertFalse(gate.idle_armed)
        self.advance_seconds(120)
        self.assertTrue(self.clock.running)

    def test_disabled_idle_pause_never_arms(self) -> None:
        gate = self.build(SessionConfig())
        self.clock.start()

        gate.on_activity()
        gate.arm_idle()

        self.assertFalse(gate.idle_armed)

    def test_config_change_toggles_idle_tracking(self) -> None:
        gate = self.build(SessionConfig())
        self.clock.start()

        self.clock.apply_config(_idle_config())
        self.assertTrue(gate.idle_armed)

        self.clock.apply_config(SessionConfig())
        self.assertFalse(gate.idle_armed)

    def test_dispose_disarms_idle(self) -> None:
        gate = self.build(_idle_config())
        self.clock.start()

        self.clock.dispose()
        gate.dispose()

        self.assertFalse(gate.idle_armed)
        self.assertEqual(0, self.scheduler.pending_count)


if __name__ == "__main__":
    unittest.main()
