"""Square-wave tone played while the sound timer is running."""

from __future__ import annotations

from array import array
from typing import Optional

from pychip8.utils import debug_enabled, debug_log


class SquareWaveBeeper:
    """Manage a looping square-wave tone using pygame's mixer."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = 440.0,
        volume: float = 0.25,
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
        self._frequency = frequency
        self._volume = max(0.0, min(1.0, volume))
        self._channel: Optional["pygame.mixer.Channel"] = None
        self._sound: Optional["pygame.mixer.Sound"] = None
        self._playing = False

    # ------------------------------------------------------------------
    # Public API

    @property
    def playing(self) -> bool:
        return self._playing

    def set_state(self, enabled: bool) -> None:
        """Start or stop the tone; repeated calls with the same state are no-ops."""

        if enabled == self._playing:
            return
        if not enabled:
            self._stop()
            return

        if self._sound is None:
            self._sound = self._build_sound()
        channel = self._channel
        if channel is None:
            channel = self._pygame.mixer.find_channel(True)
            if channel is None:
                if debug_enabled("audio"):
                    debug_log("audio", "no free mixer channel")
                return
            self._channel = channel

        channel.play(self._sound, loops=-1)
        channel.set_volume(self._volume)
        self._playing = True
        if debug_enabled("audio"):
            debug_log("audio", "tone on freq=%.1f", self._frequency)

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        self._stop()
        self._channel = None
        self._sound = None

    # ------------------------------------------------------------------
    # Internals

    def _stop(self) -> None:
        if self._channel is not None:
            self._channel.stop()
        if self._playing and debug_enabled("audio"):
            debug_log("audio", "tone off")
        self._playing = False

    def _build_sound(self) -> "pygame.mixer.Sound":
        return self._pygame.mixer.Sound(buffer=build_square_wave(self._sample_rate, self._frequency).tobytes())


def build_square_wave(sample_rate: int, frequency: float, amplitude: int = 12_000) -> array:
    """Return one period of a signed 16-bit square wave."""

    period_samples = max(2, int(round(sample_rate / frequency)))
    half = period_samples // 2
    buffer = array("h")
    for index in range(period_samples):
        buffer.append(amplitude if index < half else -amplitude)
    return buffer


__all__ = ["SquareWaveBeeper", "build_square_wave"]
