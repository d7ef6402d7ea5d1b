"""Exact-match fingerboard lookup for string instruments."""

from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..logger import get_logger
from ..note_types import CanonicalNote, Fingering, FretPosition, InstrumentString
from ..note_utils import parse_note_string, transpose

logger = get_logger(__name__)

# Finger labels for frets 1-8: index to little finger in two hand positions
DEFAULT_FINGER_PATTERN: Tuple[str, ...] = ("1", "2", "3", "4", "1", "2", "3", "4")
OPEN_FINGER = "Open"


def build_string(
    name: str,
    open_note: Union[str, CanonicalNote],
    frets: int = 8,
    fingers: Sequence[str] = DEFAULT_FINGER_PATTERN,
) -> InstrumentString:
    """Build a string with a chromatic fret table.

    Args:
        name: Display name of the string (e.g. 'E')
        open_note: Note of the open string, as a note or note string
        frets: Highest fret in the table
        fingers: Finger labels for frets 1 and up, repeated if too short

    Returns:
        InstrumentString: The string with frets 0..``frets``
    """
    if isinstance(open_note, str):
        open_note = parse_note_string(open_note)
    if frets < 0:
        raise ValueError(f"frets must be >= 0, got {frets}")
    if frets and not fingers:
        raise ValueError("At least one finger label is needed for fretted notes")

    table = [FretPosition(0, open_note, OPEN_FINGER)]
    for fret in range(1, frets + 1):
        finger = fingers[(fret - 1) % len(fingers)]
        table.append(FretPosition(fret, transpose(open_note, fret), finger))
    return InstrumentString(name=name, open_note=open_note, fret_table=tuple(table))


class FingerboardMapper:
    """
    Finds where a note is played on a set of strings.

    Strings are tried in the order given (lowest first) and the first string
    whose table holds the exact note, octave included, wins. Notes outside
    every table have no fingering; nothing is rounded to a nearby fret.
    """

    def __init__(self, strings: Iterable[InstrumentString]) -> None:
        self._strings = tuple(strings)
        if not self._strings:
            raise ValueError("Fingerboard needs at least one string")

    @property
    def strings(self) -> Tuple[InstrumentString, ...]:
        return self._strings

    @property
    def range(self) -> Tuple[CanonicalNote, CanonicalNote]:
        """Lowest and highest note reachable on the fingerboard."""
        lowest = min(s.open_note for s in self._strings)
        highest = max(s.highest_note for s in self._strings)
        return lowest, highest

    def _matches(self, note: CanonicalNote) -> Iterator[Fingering]:
        for index, string in enumerate(self._strings):
            for position in string.fret_table:
                if position.note == note:
                    yield Fingering(
                        string_index=index,
                        string=string,
                        fret=position.fret,
                        finger=position.finger,
                    )
                    break

    def positions_for(self, note: Optional[CanonicalNote]) -> List[Fingering]:
        """Every exact match of ``note``, in string order."""
        if note is None:
            return []
        return list(self._matches(note))

    def find_fingering(self, note: Optional[CanonicalNote]) -> Optional[Fingering]:
        """The preferred fingering for ``note``, or None if it cannot be played."""
        if note is None:
            return None
        fingering = next(self._matches(note), None)
        if fingering is None:
            logger.debug(f"No fingering for {note}")
        return fingering
