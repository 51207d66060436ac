"""Musical notes written as text, such as "A4", "C#5", "G3-" or "-"."""

from __future__ import annotations

import re

REFERENCE_FREQUENCY = 440.0
REFERENCE_OCTAVE = 4
MAX_OCTAVE = 8

_NOTE_PATTERN = re.compile(r"([A-G])(#)?([0-8])?(-)?|(-)")

_SEMITONES_FROM_A = {
    "C": -9,
    "C#": -8,
    "D": -7,
    "D#": -6,
    "E": -5,
    "F": -4,
    "F#": -3,
    "G": -2,
    "G#": -1,
    "A": 0,
    "A#": 1,
    "B": 2,
}


class Note:
    """A note name with optional sharp and an octave, or a release marker.

    A trailing "-" after a note, or a lone "-", marks the release of the
    sounding note.
    """

    def __init__(self, text: str) -> None:
        match = _NOTE_PATTERN.fullmatch(text)
        if match is None:
            raise ValueError(f"Invalid note format: {text}")

        if text == "-":
            self.name = ""
            self.sharp = False
            self.octave = 0
            self.released = True
            return

        if match.group(3) is None:
            raise ValueError(f"Octave is missing in note: {text}")
        self.name = match.group(1)
        self.sharp = match.group(2) is not None
        self.octave = int(match.group(3))
        self.released = match.group(4) is not None
        if not 0 <= self.octave <= MAX_OCTAVE:
            raise ValueError(f"Octave must be between 0 and {MAX_OCTAVE}: {text}")

    def __repr__(self) -> str:
        return (
            f"Note(name={self.name!r}, sharp={self.sharp}, "
            f"octave={self.octave}, released={self.released})"
        )

    def frequency(self) -> float:
        """Return the equal-tempered frequency in hertz, with A4 at 440 Hz."""
        key = self.name + ("#" if self.sharp else "")
        try:
            semitones = _SEMITONES_FROM_A[key]
        except KeyError:
            raise ValueError(f"Invalid note: {key}") from None
        semitones += (self.octave - REFERENCE_OCTAVE) * 12
        return REFERENCE_FREQUENCY * 2 ** (semitones / 12.0)