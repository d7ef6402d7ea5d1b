"""Type definitions for the Note Sight project."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Tuple

# Fixed sharp ordering, index == pitch class index
SHARP_NOTES: Tuple[str, ...] = (
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)


@functools.total_ordering
@dataclass(frozen=True)
class CanonicalNote:
    """A sharp-spelled pitch class plus a signed octave (e.g. C#4)."""

    pitch_class: str  # One of SHARP_NOTES
    octave: int

    def __post_init__(self):
        if self.pitch_class not in SHARP_NOTES:
            raise ValueError(
                f"Pitch class must be one of {', '.join(SHARP_NOTES)}, "
                f"got {self.pitch_class!r}"
            )

    @property
    def pitch_index(self) -> int:
        return SHARP_NOTES.index(self.pitch_class)

    @property
    def note_number(self) -> int:
        """Linear semitone index, (octave + 1) * 12 + pitch index."""
        return (self.octave + 1) * 12 + self.pitch_index

    @property
    def is_sharp(self) -> bool:
        return self.pitch_class.endswith("#")

    def __lt__(self, other: CanonicalNote) -> bool:
        if not isinstance(other, CanonicalNote):
            return NotImplemented
        return self.note_number < other.note_number

    def __str__(self):
        return f"{self.pitch_class}{self.octave}"


class EstimateStatus(Enum):
    """Why a frame did or did not produce a frequency."""

    DETECTED = "detected"
    BELOW_THRESHOLD = "below_threshold"
    OUT_OF_BAND = "out_of_band"


@dataclass(frozen=True)
class PitchEstimate:
    """Result of analysing one magnitude frame."""

    frequency_hz: Optional[float]  # None when no pitch was found
    amplitude: float  # Peak magnitude in the analysis band
    status: EstimateStatus = EstimateStatus.DETECTED
    bin_index: Optional[int] = None

    @property
    def is_absent(self) -> bool:
        return self.frequency_hz is None

    @classmethod
    def absent(
        cls, status: EstimateStatus, amplitude: float = 0.0
    ) -> PitchEstimate:
        return cls(frequency_hz=None, amplitude=amplitude, status=status)


@dataclass(frozen=True)
class FretPosition:
    """One entry of a string's fret table."""

    fret: int  # 0 for the open string
    note: CanonicalNote
    finger: str  # 'Open', '1', '2', ...

    def __str__(self):
        return f"F{self.fret}:{self.note}({self.finger})"


@dataclass(frozen=True)
class InstrumentString:
    """An open string and its chromatic fret table.

    The table must start at fret 0 on the open note and climb one fret and
    one semitone per entry, so that an exact note lookup has at most one
    answer per string.
    """

    name: str
    open_note: CanonicalNote
    fret_table: Tuple[FretPosition, ...] = field(default_factory=tuple)

    def __post_init__(self):
        table = tuple(self.fret_table)
        object.__setattr__(self, "fret_table", table)
        if not table:
            raise ValueError(f"String {self.name!r} has an empty fret table")
        if table[0].fret != 0 or table[0].note != self.open_note:
            raise ValueError(
                f"String {self.name!r} must start with fret 0 on {self.open_note}, "
                f"got {table[0]}"
            )
        for previous, current in zip(table, table[1:]):
            if (
                current.fret != previous.fret + 1
                or current.note.note_number != previous.note.note_number + 1
            ):
                raise ValueError(
                    f"String {self.name!r} fret table is not chromatic at {current}"
                )

    @property
    def highest_note(self) -> CanonicalNote:
        return self.fret_table[-1].note

    def __str__(self):
        return f"{self.name} ({self.open_note})"


@dataclass(frozen=True)
class Fingering:
    """Where a note is played on a fingerboard."""

    string_index: int  # 0 is the lowest string
    string: InstrumentString
    fret: int
    finger: str

    def __str__(self):
        return f"{self.string.name} string, fret {self.fret}, finger {self.finger}"


@dataclass(frozen=True)
class KeyboardKey:
    """A single piano key."""

    pitch_class: str
    octave: int

    @property
    def is_black(self) -> bool:
        return self.pitch_class.endswith("#")

    @property
    def note(self) -> CanonicalNote:
        return CanonicalNote(self.pitch_class, self.octave)

    def __str__(self):
        return f"{self.pitch_class}{self.octave}"


@dataclass(frozen=True)
class StaffPlacement:
    """A note placed on the treble or bass staff of a grand staff."""

    TREBLE: ClassVar[str] = "treble"
    BASS: ClassVar[str] = "bass"

    clef: str
    note: CanonicalNote  # The note as written, after any octave shift
    accidental: Optional[str]  # '#' or None

    @property
    def key(self) -> str:
        """Engraving key such as 'c#/5'."""
        return f"{self.note.pitch_class.lower()}/{self.note.octave}"


@dataclass(frozen=True)
class DisplaySnapshot:
    """Everything a renderer needs to draw one detected note.

    An absent note gives an empty snapshot, which renderers must treat as
    "clear the display".
    """

    note: Optional[CanonicalNote] = None
    staff: Optional[StaffPlacement] = None
    highlighted_keys: Tuple[KeyboardKey, ...] = ()
    fingering: Optional[Fingering] = None

    @property
    def is_empty(self) -> bool:
        return self.note is None

    def __str__(self):
        if self.note is None:
            return "-"
        fingering = str(self.fingering) if self.fingering else "no fingering"
        clef = self.staff.clef if self.staff else "-"
        return f"{self.note} [{clef} staff] {fingering}"
