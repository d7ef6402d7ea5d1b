"""Note Sight: live pitch detection mapped onto staff, keyboard and fingerboard."""

from .errors import (
    CapturePermissionError,
    NoteParseError,
    NoteSightError,
    UnsupportedEnvironmentError,
)
from .note_types import CanonicalNote, DisplaySnapshot, PitchEstimate
from .note_utils import (
    note_number_to_note,
    note_to_note_number,
    parse_note_string,
    transpose,
)

__version__ = "0.1.0"

__all__ = [
    "CanonicalNote",
    "DisplaySnapshot",
    "PitchEstimate",
    "NoteSightError",
    "NoteParseError",
    "CapturePermissionError",
    "UnsupportedEnvironmentError",
    "note_number_to_note",
    "note_to_note_number",
    "parse_note_string",
    "transpose",
]
