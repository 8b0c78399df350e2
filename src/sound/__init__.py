"""Start/end chime playback for phase transitions."""

from .player import SoundDevicePlayer
from .tones import SAMPLE_RATE_HZ, SoundError, synthesize_chime

__all__ = [
    "SAMPLE_RATE_HZ",
    "SoundDevicePlayer",
    "SoundError",
    "synthesize_chime",
]
