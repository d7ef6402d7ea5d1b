"""Derives everything the renderers draw from one canonical note."""

from typing import Optional, Union

from .instruments.fingerboard import FingerboardMapper
from .instruments.keyboard import KeyboardMapper
from .instruments.tunings import DOUBLE_BASS
from .note_types import CanonicalNote, DisplaySnapshot
from .note_utils import place_on_grand_staff, try_parse_note


class NoteDisplay:
    """Builds display snapshots for the staff, keyboard and fingerboard views.

    All three views are computed from the same canonical note, so they can
    never disagree. No state is kept between calls.
    """

    def __init__(
        self,
        keyboard: Optional[KeyboardMapper] = None,
        fingerboard: Optional[FingerboardMapper] = None,
        staff_shift: int = 12,
    ) -> None:
        self.keyboard = keyboard or KeyboardMapper()
        self.fingerboard = fingerboard or FingerboardMapper(DOUBLE_BASS)
        self.staff_shift = staff_shift

    def snapshot(self, note: Union[CanonicalNote, str, None]) -> DisplaySnapshot:
        """Snapshot for a note, a note string, or None.

        Unparsable strings give the same empty snapshot as None.
        """
        note = try_parse_note(note)
        if note is None:
            return DisplaySnapshot()
        return DisplaySnapshot(
            note=note,
            staff=place_on_grand_staff(note, self.staff_shift),
            highlighted_keys=self.keyboard.highlighted_keys(note),
            fingering=self.fingerboard.find_fingering(note),
        )
