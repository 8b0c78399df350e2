"""Synthesized two-note chimes for phase start and end cues."""

from __future__ import annotations

import numpy as np

from pomodoro.constants import SOUND_END, SOUND_START

SAMPLE_RATE_HZ = 44100

_CHIME_FREQUENCIES_HZ: dict[str, tuple[float, float]] = {
    SOUND_START: (660.0, 880.0),
    SOUND_END: (880.0, 587.33),
}


class SoundError(Exception):
    """Raised when a chime cannot be synthesized or played."""


def synthesize_chime(
    which: str,
    *,
    sample_rate_hz: int = SAMPLE_RATE_HZ,
    volume: float = 0.3,
    note_seconds: float = 0.14,
    gap_seconds: float = 0.05,
    fade_seconds: float = 0.01,
) -> np.ndarray:
    """Return a mono float32 PCM buffer for the `start` or `end` chime."""
    frequencies = _CHIME_FREQUENCIES_HZ.get(which)
    if frequencies is None:
        raise SoundError(f"Unknown chime: {which}")

    amplitude = float(np.clip(volume, 0.0, 1.0))
    note_frames = int(note_seconds * sample_rate_hz)
    t = np.arange(note_frames) / sample_rate_hz

    fade_frames = min(int(fade_seconds * sample_rate_hz), note_frames // 2)
    envelope = np.ones(note_frames)
    if fade_frames > 0:
        ramp = np.linspace(0.0, 1.0, fade_frames)
        envelope[:fade_frames] = ramp
        envelope[-fade_frames:] = ramp[::-1]

    gap = np.zeros(int(gap_seconds * sample_rate_hz))
    first, second = (
        amplitude * np.sin(2 * np.pi * frequency * t) * envelope
        for frequency in frequencies
    )
    return np.concatenate([first, gap, second]).astype(np.float32)
