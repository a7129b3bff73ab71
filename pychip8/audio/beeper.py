"""Square-wave beep played when the sound timer expires."""

from __future__ import annotations

from array import array
from typing import Optional

from pychip8.utils import debug_enabled, debug_log


class SquareWaveBeeper:
    """Play a short square-wave tone using pygame's mixer."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = 440.0,
        volume: float = 0.35,
        duration_ms: int = 120,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")

        if frequency <= 0.0:
            raise ValueError("frequency must be positive")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._volume = max(0.0, min(1.0, volume))
        self._duration_ms = max(1, duration_ms)
        self._frequency = frequency
        self._channel: Optional[pygame.mixer.Channel] = None
        self._sound: Optional[pygame.mixer.Sound] = self._build_sound(frequency)

    # ------------------------------------------------------------------
    # Public API

    def beep(self) -> None:
        """Start one tone; a tone already playing is restarted."""

        if self._sound is None:
            return
        channel = self._channel
        if channel is None:
            channel = self._pygame.mixer.find_channel(True)
            if channel is None:
                if debug_enabled("audio"):
                    debug_log("audio", "no_free_channel")
                return
            self._channel = channel
        channel.play(self._sound, loops=-1, maxtime=self._duration_ms)
        channel.set_volume(self._volume)

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        if self._channel is not None:
            self._channel.stop()
        self._channel = None
        self._sound = None

    # ------------------------------------------------------------------
    # Internals

    def _build_sound(self, frequency: float) -> Optional["pygame.mixer.Sound"]:
        period_samples = max(2, int(round(self._sample_rate / frequency)))
        half = period_samples // 2

        buffer = array("h")
        amplitude = 12_000
        for index in range(period_samples):
            buffer.append(amplitude if index < half else -amplitude)

        try:
            sound = self._pygame.mixer.Sound(buffer=buffer.tobytes())
        except self._pygame.error as exc:  # pragma: no cover - pygame error path
            if debug_enabled("audio"):
                debug_log("audio", "sound_build_failed=%s", exc)
            return None
        return sound


__all__ = ["SquareWaveBeeper"]
