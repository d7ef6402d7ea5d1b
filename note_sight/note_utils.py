"""Utility functions for working with canonical notes and note numbers.

Note numbers form the linear pitch axis used for all arithmetic:
``note_number = (octave + 1) * 12 + pitch_index``, so C4 is 60 and A4 is 69.
"""

import re
from typing import Dict, Optional, Tuple

from .errors import NoteParseError
from .logger import get_logger
from .note_types import SHARP_NOTES, CanonicalNote, StaffPlacement

# Get logger for this module
logger = get_logger(__name__)

# Sanity window for notes produced from measured frequencies: C0 up to C10
DEFAULT_OCTAVE_RANGE: Tuple[int, int] = (0, 10)
MIN_NOTE_NUMBER = 12
MAX_NOTE_NUMBER = 132

# Flats accepted on input, mapped to their sharp spelling
FLAT_TO_SHARP: Dict[str, str] = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
}

# Natural letters, used for spellings such as Cb, Fb, E# and B#
NATURAL_INDEX: Dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

# This pattern matches:
# - Note letter (A-G, case insensitive)
# - Optional accidental (# or b)
# - Optionally signed octave number
NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#b]?)([+-]?\d+)$")


def note_to_note_number(note: CanonicalNote) -> int:
    """Convert a canonical note to its note number (C4 -> 60)."""
    return (note.octave + 1) * 12 + SHARP_NOTES.index(note.pitch_class)


def note_number_to_note(note_number: int) -> CanonicalNote:
    """Convert a note number back to a canonical note (60 -> C4).

    Python's floor division and modulo already give a non-negative pitch index
    and a floored octave for negative inputs.
    """
    note_number = int(note_number)
    pitch_index = ((note_number % 12) + 12) % 12
    octave = note_number // 12 - 1
    return CanonicalNote(SHARP_NOTES[pitch_index], octave)


def octave_range_to_note_numbers(octave_range: Tuple[int, int]) -> Tuple[int, int]:
    """Note numbers of C in the lowest and highest octave (0, 10 -> 12, 132)."""
    low, high = (int(o) for o in octave_range)
    if high < low:
        raise ValueError(f"Invalid octave range: {low}-{high}")
    return (low + 1) * 12, (high + 1) * 12


def is_valid_note_number(
    note_number: int,
    lowest: int = MIN_NOTE_NUMBER,
    highest: int = MAX_NOTE_NUMBER,
) -> bool:
    return lowest <= note_number <= highest


def parse_note_string(text: str) -> CanonicalNote:
    """Parse a note string such as 'C#4', 'Bb3' or 'E-1'.

    Args:
        text: Letter A-G, optional '#' or 'b', then a (signed) octave

    Returns:
        CanonicalNote: The sharp-spelled note

    Raises:
        NoteParseError: If the text is not a note

    Examples:
        >>> str(parse_note_string('Bb3'))  # 'A#3'
        >>> str(parse_note_string('Cb4'))  # 'B3'
    """
    if not isinstance(text, str):
        raise NoteParseError(text, "expected a string")

    match = NOTE_PATTERN.match(text.strip())
    if not match:
        raise NoteParseError(text)

    letter, accidental, octave_text = match.groups()
    letter = letter.upper()
    octave = int(octave_text)

    spelled = letter + accidental
    if spelled in SHARP_NOTES:
        return CanonicalNote(spelled, octave)
    if spelled in FLAT_TO_SHARP:
        return CanonicalNote(FLAT_TO_SHARP[spelled], octave)

    # Cb, Fb, E# and B# cross a letter boundary and may carry into the next
    # or previous octave, so resolve them in note number space.
    offset = 1 if accidental == "#" else -1
    note_number = (octave + 1) * 12 + NATURAL_INDEX[letter] + offset
    return note_number_to_note(note_number)


def try_parse_note(text) -> Optional[CanonicalNote]:
    """Parse a note string, returning None instead of raising."""
    if text is None or isinstance(text, CanonicalNote):
        return text
    try:
        return parse_note_string(text)
    except NoteParseError as e:
        logger.debug(f"Ignoring unparsable note: {e}")
        return None


def transpose(note: CanonicalNote, semitones: int) -> CanonicalNote:
    """Shift a note by a signed number of semitones (B3 + 1 -> C4)."""
    return note_number_to_note(note_to_note_number(note) + int(semitones))


def place_on_grand_staff(
    note: CanonicalNote, octave_shift: int = 12
) -> StaffPlacement:
    """Place a note on the treble or bass staff of a grand staff.

    The note is first transposed by ``octave_shift`` semitones (one octave up by
    default) so that low voices and instruments sit on the staves instead of
    far below them. Notes in octave 4 or higher after the shift go on the
    treble staff, the rest on the bass staff.

    Args:
        note: The detected note
        octave_shift: Semitones to transpose before choosing the staff

    Returns:
        StaffPlacement: clef, written note and accidental
    """
    written = transpose(note, octave_shift)
    clef = StaffPlacement.TREBLE if written.octave >= 4 else StaffPlacement.BASS
    accidental = "#" if written.is_sharp else None
    return StaffPlacement(clef=clef, note=written, accidental=accidental)
