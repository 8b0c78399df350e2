import unittest

from pomodoro import Phase, SessionConfig, SessionSnapshot
from pomodoro.messages import (
    break_ordinal,
    format_duration,
    status_text,
    work_completed_message,
)


def _snapshot(**overrides) -> SessionSnapshot:
    values = {
        "phase": Phase.WORK,
        "cycle_count": 0,
        "remaining_seconds": 1500,
        "running": True,
        "paused_by_idle": False,
        "started": True,
    }
    values.update(overrides)
    return SessionSnapshot(**values)


class MessagesTests(unittest.TestCase):
    def test_format_duration_pads_minutes_and_seconds(self) -> None:
        self.assertEqual("00:00", format_duration(0))
        self.assertEqual("01:05", format_duration(65))
        self.assertEqual("60:00", format_duration(3600))
        self.assertEqual("00:00", format_duration(-3))

    def test_break_ordinal_names_short_and_long_rests(self) -> None:
        self.assertEqual(
            ["Long", "1st", "2nd", "3rd"],
            [break_ordinal(count) for count in range(4)],
        )
        self.assertEqual("4th", break_ordinal(0, for_notification=True))

    def test_status_text_for_each_state(self) -> None:
        config = SessionConfig()
        self.assertEqual("🟢 Work 25:00", status_text(_snapshot(), config))
        self.assertEqual(
            "🔴 2nd Break 04:59",
            status_text(
                _snapshot(phase=Phase.SHORT_REST, cycle_count=2, remaining_seconds=299),
                config,
            ),
        )
        self.assertEqual(
            "⏸️ Paused 12:30",
            status_text(_snapshot(running=False, remaining_seconds=750), config),
        )

    def test_status_text_shows_clock_while_paused_even_when_hidden(self) -> None:
        config = SessionConfig(show_clock=False)
        self.assertEqual(
            "🔴 Long Break",
            status_text(_snapshot(phase=Phase.LONG_REST), config),
        )
        self.assertEqual(
            "⏸️ Paused 25:00",
            status_text(_snapshot(running=False), config),
        )

    def test_work_completed_message_describes_next_rest(self) -> None:
        config = SessionConfig(long_rest_duration=1200)
        self.assertEqual(
            "🔴 3rd Pomodoro completed! Time for a short break.",
            work_completed_message(3, config),
        )
        self.assertEqual(
            "🔴 4th Pomodoro completed! Time for a 20 minute long break.",
            work_completed_message(0, config),
        )

    def test_long_rest_minutes_are_not_truncated(self) -> None:
        self.assertEqual(
            "🔴 4th Pomodoro completed! Time for a 1.5 minute long break.",
            work_completed_message(4, SessionConfig(long_rest_duration=90)),
        )


if __name__ == "__main__":
    unittest.main()
