"""Melodies read from text files, rendered to sine-wave samples and played."""

from __future__ import annotations

import math
import re
import sys
from array import array
from collections.abc import Iterable, Sequence
from pathlib import Path

from parlabs.note import Note

SAMPLE_RATE = 44100
FADE_OUT_SECONDS = 0.05
MIX_GAIN = 0.5
END_MARKER = "END"

USAGE = "Usage: parlabs-player <file_path>"

_INTEGER = re.compile(r"\s*[+-]?[0-9]+")


def sine_wave(frequency: float, duration: float, sample_rate: int) -> list[float]:
    """Return duration seconds of a unit-amplitude sine at the given frequency."""
    count = int(duration * sample_rate)
    return [
        math.sin(2 * math.pi * frequency * (i / sample_rate)) for i in range(max(0, count))
    ]


def mix_waves(
    source: Sequence[float], destination: Sequence[float], gain: float
) -> list[float]:
    """Return destination with source added at gain over their common length."""
    mixed = list(destination)
    for i, sample in enumerate(source[: len(mixed)]):
        mixed[i] += sample * gain
    return mixed


def apply_fade_out(
    wave: Sequence[float], fade_seconds: float, sample_rate: int
) -> list[float]:
    """Return wave with a linear fade to silence over its last fade_seconds."""
    faded = list(wave)
    fade_samples = min(int(fade_seconds * sample_rate), len(faded))
    offset = len(faded) - fade_samples
    for i in range(fade_samples):
        faded[offset + i] *= 1.0 - i / fade_samples
    return faded


def normalize_amplitude(wave: Sequence[float]) -> list[float]:
    """Return wave scaled down so no sample exceeds 1 in magnitude."""
    peak = max((abs(sample) for sample in wave), default=0.0)
    if peak > 1.0:
        return [sample / peak for sample in wave]
    return list(wave)


def play_samples(samples: Sequence[float], sample_rate: int) -> None:
    """Play mono samples in [-1, 1] on the default audio device and wait."""
    import pygame

    try:
        pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
    except pygame.error as error:
        raise RuntimeError(f"Audio initialization failed: {error}") from error
    try:
        init = pygame.mixer.get_init()
        if init is None:
            raise RuntimeError("Audio initialization failed")
        channels = init[2]
        pcm = array("h")
        for sample in samples:
            value = int(max(-1.0, min(1.0, sample)) * 32767)
            pcm.extend([value] * channels)
        sound = pygame.mixer.Sound(buffer=pcm.tobytes())
        sound.play()
        while pygame.mixer.get_busy():
            pygame.time.wait(10)
    except pygame.error as error:
        raise RuntimeError(f"Audio playback failed: {error}") from error
    finally:
        pygame.mixer.quit()


class Melody:
    """A tempo in notes per minute and the notes played one per beat."""

    def __init__(self, tempo: int, notes: Iterable[Note]) -> None:
        if tempo <= 0:
            raise ValueError("Tempo must be positive")
        self.tempo = tempo
        self.notes = tuple(notes)

    @classmethod
    def from_file(cls, path: str | Path) -> Melody:
        """Read a tempo line, then one note per line up to an END line."""
        try:
            with open(path) as file:
                lines = file.read().splitlines()
        except OSError as error:
            raise RuntimeError(f"Failed to open file: {path}") from error

        match = _INTEGER.match(lines[0]) if lines else None
        if match is None:
            raise ValueError(f"Invalid tempo in file: {path}")
        tempo = int(match.group())

        notes = []
        for line in lines[1:]:
            if line == END_MARKER:
                break
            if line:
                notes.append(Note(line))
        return cls(tempo, notes)

    def render(self, sample_rate: int = SAMPLE_RATE) -> list[float]:
        """Return the samples of the whole melody.

        A new note blends in the faded tail of the sounding one; a release
        repeats the sounding note with a fade-out and silences it.
        """
        seconds_per_note = 60.0 / self.tempo
        result: list[float] = []
        current: list[float] = []

        for note in self.notes:
            if note.released:
                if not current:
                    continue
                wave = apply_fade_out(current, FADE_OUT_SECONDS, sample_rate)
                current = []
            else:
                wave = sine_wave(note.frequency(), seconds_per_note, sample_rate)
                if current:
                    tail = apply_fade_out(current, FADE_OUT_SECONDS, sample_rate)
                    wave = mix_waves(tail, wave, MIX_GAIN)
                current = list(wave)
            result.extend(normalize_amplitude(wave))
        return result

    def play(self) -> None:
        """Render the melody and play it to the end."""
        samples = self.render(SAMPLE_RATE)
        if samples:
            play_samples(samples, SAMPLE_RATE)


def main(argv: Sequence[str] | None = None) -> int:
    """Play the melody file named on the command line."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        if len(argv) < 1:
            raise ValueError(USAGE)
        Melody.from_file(argv[0]).play()
        return 0
    except Exception as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())