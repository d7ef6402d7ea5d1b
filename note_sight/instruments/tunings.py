"""Stock string configurations, lowest string first."""

from typing import Any, Dict, List, Sequence, Tuple

from ..note_types import InstrumentString
from ..note_utils import parse_note_string
from .fingerboard import DEFAULT_FINGER_PATTERN, build_string

# Standard double bass tuning (E A D G)
DOUBLE_BASS_TUNING: Tuple[str, ...] = ("E1", "A1", "D2", "G2")

# Standard guitar tuning (E A D G B E)
GUITAR_TUNING: Tuple[str, ...] = ("E2", "A2", "D3", "G3", "B3", "E4")

DEFAULT_FRETS = 8


def strings_from_tuning(
    tuning: Sequence[str],
    frets: int = DEFAULT_FRETS,
    fingers: Sequence[str] = DEFAULT_FINGER_PATTERN,
) -> Tuple[InstrumentString, ...]:
    """Build one chromatic string per open note, named after its pitch class."""
    strings = []
    for open_note in tuning:
        note = parse_note_string(open_note)
        strings.append(
            build_string(note.pitch_class, note, frets=frets, fingers=fingers)
        )
    return tuple(strings)


def strings_from_config(config: List[Dict[str, Any]]) -> Tuple[InstrumentString, ...]:
    """Build strings from configuration records.

    Each record needs ``open_note`` and may set ``name``, ``frets`` and
    ``fingers``::

        [{"name": "E", "open_note": "E1", "frets": 8}, ...]

    Raises:
        NoteParseError: If an open note cannot be parsed
        ValueError: If a record is incomplete
    """
    strings = []
    for record in config:
        if "open_note" not in record:
            raise ValueError(f"String record without open_note: {record}")
        strings.append(
            build_string(
                record.get("name", record["open_note"]),
                record["open_note"],
                frets=int(record.get("frets", DEFAULT_FRETS)),
                fingers=tuple(record.get("fingers", DEFAULT_FINGER_PATTERN)),
            )
        )
    return tuple(strings)


def strings_to_config(strings: Sequence[InstrumentString]) -> List[Dict[str, Any]]:
    """Inverse of ``strings_from_config`` for JSON storage."""
    return [
        {
            "name": s.name,
            "open_note": str(s.open_note),
            "frets": s.fret_table[-1].fret,
            "fingers": [p.finger for p in s.fret_table[1:]],
        }
        for s in strings
    ]


DOUBLE_BASS: Tuple[InstrumentString, ...] = strings_from_tuning(DOUBLE_BASS_TUNING)
GUITAR: Tuple[InstrumentString, ...] = strings_from_tuning(GUITAR_TUNING)

INSTRUMENTS: Dict[str, Tuple[InstrumentString, ...]] = {
    "double_bass": DOUBLE_BASS,
    "guitar": GUITAR,
}
