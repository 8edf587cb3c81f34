"""Software mixer for a fixed pool of playing sounds."""

from __future__ import annotations

from array import array
from dataclasses import dataclass

from .mathutil import S16_MAX, S16_MIN, clamp
from .wav import LoadedSound

MAX_PLAYING_SOUNDS = 32


@dataclass
class PlayingSound:
    sound: LoadedSound
    looping: bool = False
    active: bool = True
    pan: float = 0.0
    volume: float = 1.0
    position: float = 0.0
    speed_multiplier: float = 1.0

    def _start(self, sound: LoadedSound, looping: bool) -> None:
        self.sound = sound
        self.looping = looping
        self.active = True
        self.pan = 0.0
        self.volume = 1.0
        self.position = 0.0
        self.speed_multiplier = 1.0


class Mixer:
    """Holds up to 32 sounds and mixes them into a stereo 16-bit stream."""

    def __init__(self) -> None:
        self._slots: list[PlayingSound] = []
        self._free: list[PlayingSound] = []

    def play(self, sound: LoadedSound, looping: bool) -> PlayingSound:
        """Start a sound, reusing the most recently freed slot."""
        if self._free:
            playing = self._free.pop()
            playing._start(sound, looping)
            return playing
        if len(self._slots) >= MAX_PLAYING_SOUNDS:
            raise RuntimeError("too many sounds playing")
        playing = PlayingSound(sound=sound, looping=looping)
        self._slots.append(playing)
        return playing

    def stop(self, playing: PlayingSound) -> None:
        if not playing.active:
            return
        playing.active = False
        self._free.append(playing)

    def mix(self, frame_count: int) -> array:
        """Return frame_count interleaved left/right signed 16-bit frames."""
        out = array("h")
        for _ in range(frame_count):
            left = 0.0
            right = 0.0
            for playing in self._slots:
                if not playing.active:
                    continue
                sound = playing.sound
                channels = sound.channel_count
                index = int(playing.position * channels)
                left_in = sound.samples[index] * playing.volume
                right_in = sound.samples[index + channels - 1] * playing.volume
                pan = playing.pan
                left += left_in * clamp(0.0, 1.0 - pan, 1.0) + right_in * clamp(0.0, -pan, 1.0)
                right += right_in * clamp(0.0, 1.0 + pan, 1.0) + left_in * clamp(0.0, pan, 1.0)

                playing.position += playing.speed_multiplier
                if playing.position >= sound.sample_count:
                    if playing.looping:
                        playing.position = 0.0
                    else:
                        self.stop(playing)
            out.append(int(clamp(S16_MIN, left * 0.5, S16_MAX)))
            out.append(int(clamp(S16_MIN, right * 0.5, S16_MAX)))
        return out