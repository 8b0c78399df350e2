import logging
import threading
import unittest

from app_config_schema import (
    AppConfig,
    IdlePauseSettings,
    RuntimeSettings,
    SoundSettings,
    TimerSettings,
    UIServerSettings,
)
from pomodoro import Phase
from runtime import CallbackScheduler, RuntimeBootstrap, RuntimeEngine


class _ManualTime:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _RecordingUIServer:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def publish(self, event_type: str, **payload) -> None:
        self.events.append((event_type, payload))

    def of_type(self, event_type: str) -> list[dict]:
        return [payload for kind, payload in self.events if kind == event_type]


class _RecordingSound:
    def __init__(self) -> None:
        self.played: list[str] = []

    def play(self, which: str) -> None:
        self.played.append(which)


def _app_config(**timer_overrides) -> AppConfig:
    timer_values = {"work_duration": 25.0, "auto_start": False}
    timer_values.update(timer_overrides)
    return AppConfig(
        timer=TimerSettings(**timer_values),
        idle_pause=IdlePauseSettings(),
        sound=SoundSettings(),
        ui_server=UIServerSettings(),
        runtime=RuntimeSettings(),
        source_file="config.toml",
    )


class RuntimeEngineTests(unittest.TestCase):
    def build(self, app_config: AppConfig) -> RuntimeEngine:
        self.time = _ManualTime()
        self.ui_server = _RecordingUIServer()
        self.sound = _RecordingSound()
        return RuntimeEngine(
            RuntimeBootstrap(
                logger=logging.getLogger("pomodoro_app"),
                app_config=app_config,
                ui_server=self.ui_server,
                sound_player=self.sound,
                scheduler=CallbackScheduler(clock=self.time),
            )
        )

    def advance(self, engine: RuntimeEngine, seconds: float) -> None:
        self.time.now += seconds
        engine.scheduler.run_pending()

    def test_initial_status_is_published(self) -> None:
        self.build(_app_config())

        self.assertEqual(
            {"text": "🟢 Work 25:00", "emphasis": "work"},
            self.ui_server.of_type("status")[-1],
        )

    def test_client_messages_are_routed_on_scheduler_thread(self) -> None:
        engine = self.build(_app_config())

        engine.handle_client_message({"type": "command", "name": "start"})
        self.assertFalse(engine.clock.started)

        engine.scheduler.run_pending()
        self.assertTrue(engine.clock.running)
        self.assertEqual(["start"], self.sound.played)

    def test_single_activation_toggles_pause(self) -> None:
        engine = self.build(_app_config())
        engine.commands.start()

        engine.route_message({"type": "activation"})
        self.advance(engine, 0.3)

        self.assertFalse(engine.clock.running)
        self.assertEqual("⏸️ Paused 25:00", self.ui_server.of_type("status")[-1]["text"])

    def request_restart(self, engine: RuntimeEngine) -> str:
        engine.route_message({"type": "command", "name": "restart"})
        return self.ui_server.of_type("confirm_request")[-1]["request_id"]

    def test_double_activation_requests_restart_confirmation(self) -> None:
        engine = self.build(_app_config())
        engine.commands.start()
        for _ in range(30):
            self.advance(engine, 1.0)

        engine.route_message({"type": "activation"})
        self.advance(engine, 0.1)
        engine.route_message({"type": "activation"})

        requests = self.ui_server.of_type("confirm_request")
        self.assertEqual(1, len(requests))
        self.assertEqual(
            "Are you sure you want to restart the current session?",
            requests[0]["prompt"],
        )
        self.assertEqual(1470, engine.clock.remaining_seconds)

        engine.route_message(
            {"type": "confirm_restart", "request_id": requests[0]["request_id"]}
        )

        self.assertEqual(1500, engine.clock.remaining_seconds)
        self.assertEqual(
            "Pomodoro timer restarted.",
            self.ui_server.of_type("notification")[-1]["message"],
        )

    def test_unrequested_confirmation_is_ignored(self) -> None:
        engine = self.build(_app_config(work_duration=1.0))
        engine.commands.start()
        for _ in range(10):
            self.advance(engine, 1.0)

        with self.assertLogs("commands", level="WARNING"):
            self.assertFalse(engine.confirm_restart("forged"))
        engine.route_message({"type": "confirm_restart", "request_id": "forged"})

        self.assertEqual(50, engine.clock.remaining_seconds)
        self.assertEqual([], self.ui_server.of_type("notification"))

    def test_confirmation_is_honored_only_once(self) -> None:
        engine = self.build(_app_config(work_duration=1.0))
        engine.commands.start()
        for _ in range(10):
            self.advance(engine, 1.0)
        request_id = self.request_restart(engine)

        self.assertTrue(engine.confirm_restart(request_id))
        for _ in range(10):
            self.advance(engine, 1.0)

        self.assertFalse(engine.confirm_restart(request_id))
        self.assertEqual(50, engine.clock.remaining_seconds)

    def test_confirmation_after_phase_change_is_stale(self) -> None:
        engine = self.build(_app_config(work_duration=1.0, short_rest_duration=1.5))
        engine.commands.start()
        for _ in range(10):
            self.advance(engine, 1.0)
        request_id = self.request_restart(engine)

        for _ in range(50):
            self.advance(engine, 1.0)
        self.assertIs(Phase.SHORT_REST, engine.clock.phase)
        self.assertEqual(90, engine.clock.remaining_seconds)

        engine.route_message({"type": "confirm_restart", "request_id": request_id})

        self.assertIs(Phase.SHORT_REST, engine.clock.phase)
        self.assertEqual(90, engine.clock.remaining_seconds)
        self.assertFalse(engine.confirm_restart(request_id))

    def test_stop_discards_outstanding_confirmation(self) -> None:
        engine = self.build(_app_config(work_duration=1.0))
        engine.commands.start()
        for _ in range(10):
            self.advance(engine, 1.0)
        request_id = self.request_restart(engine)

        engine.route_message({"type": "command", "name": "stop"})
        engine.route_message({"type": "command", "name": "start"})
        for _ in range(5):
            self.advance(engine, 1.0)

        self.assertFalse(engine.confirm_restart(request_id))
        self.assertEqual(55, engine.clock.remaining_seconds)

    def test_restart_of_unstarted_session_does_not_prompt(self) -> None:
        engine = self.build(_app_config())

        engine.route_message({"type": "command", "name": "restart"})

        self.assertEqual([], self.ui_server.of_type("confirm_request"))

    def test_phase_completion_publishes_notification(self) -> None:
        engine = self.build(_app_config(work_duration=1.0))
        engine.commands.start()

        for _ in range(60):
            self.advance(engine, 1.0)

        self.assertIs(Phase.SHORT_REST, engine.clock.phase)
        notification = self.ui_server.of_type("notification")[-1]
        self.assertEqual(
            "🔴 1st Pomodoro completed! Time for a short break.",
            notification["message"],
        )
        self.assertEqual(3000, notification["duration_ms"])

    def test_unknown_message_type_is_ignored(self) -> None:
        engine = self.build(_app_config())

        engine.route_message({"type": "telemetry"})

        self.assertFalse(engine.clock.started)

    def test_run_auto_starts_and_shuts_down_on_stop(self) -> None:
        engine = self.build(_app_config(auto_start=True))
        started = threading.Event()

        def stop_once_started() -> None:
            if engine.clock.running:
                started.set()
            engine.request_stop()

        engine.scheduler.post(stop_once_started)

        self.assertEqual(0, engine.run())
        self.assertTrue(started.is_set())
        self.assertEqual(0, engine.scheduler.pending_count)
        engine.shutdown()


if __name__ == "__main__":
    unittest.main()
