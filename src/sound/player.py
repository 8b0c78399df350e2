"""Sounddevice-backed chime playback with a terminal-bell fallback."""

from __future__ import annotations

import logging
import sys
import threading
from typing import Optional, TextIO

import numpy as np
import sounddevice as sd

from .tones import SAMPLE_RATE_HZ, SoundError, synthesize_chime


class SoundDevicePlayer:
    """Plays start/end chimes on a background thread, never raising to callers."""
    def __init__(
        self,
        output_device_index: Optional[int] = None,
        *,
        volume: float = 0.3,
        bell_fallback: bool = True,
        blocksize: int = 2048,
        bell_stream: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._volume = volume
        self._bell_fallback = bell_fallback
        self._blocksize = blocksize
        self._bell_stream = bell_stream
        self._logger = logger or logging.getLogger("sound")
        self._chimes: dict[str, np.ndarray] = {}

    def play(self, which: str) -> None:
        try:
            wav = self._chime(which)
        except SoundError as error:
            self._logger.error("Could not prepare chime: %s", error)
            self._ring_bell()
            return

        worker = threading.Thread(
            target=self._play_safely,
            args=(which, wav),
            daemon=True,
            name=f"chime-{which}",
        )
        worker.start()

    def _chime(self, which: str) -> np.ndarray:
        wav = self._chimes.get(which)
        if wav is None:
            wav = synthesize_chime(which, volume=self._volume)
            self._chimes[which] = wav
        return wav

    def _play_safely(self, which: str, wav: np.ndarray) -> None:
        try:
            self.play_blocking(wav, SAMPLE_RATE_HZ)
        except SoundError as error:
            self._logger.error("Could not play %s chime: %s", which, error)
            self._ring_bell()

    def play_blocking(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        if wav.ndim != 1:
            raise SoundError("Expected mono PCM array for playback")
        if len(wav) == 0:
            raise SoundError("Cannot play empty audio buffer")

        pos = 0

        def callback(outdata, frames, time_info, status):
            nonlocal pos
            if status:
                self._logger.warning("Sounddevice status: %s", status)

            end = pos + frames
            chunk = wav[pos:end]

            if len(chunk) < frames:
                outdata[: len(chunk), 0] = chunk
                outdata[len(chunk) :, 0] = 0
                raise sd.CallbackStop()

            outdata[:, 0] = chunk
            pos = end

        try:
            with sd.OutputStream(
                channels=1,
                samplerate=sample_rate_hz,
                blocksize=self._blocksize,
                callback=callback,
                device=self._output_device_index,
            ):
                sd.sleep(int(len(wav) / sample_rate_hz * 1000) + 200)
        except Exception as error:
            raise SoundError(f"Audio playback failed: {error}") from error

    def _ring_bell(self) -> None:
        if not self._bell_fallback:
            return
        stream = self._bell_stream or sys.stdout
        try:
            stream.write("\a")
            stream.flush()
        except (OSError, ValueError) as error:
            self._logger.debug("Terminal bell unavailable: %s", error)
