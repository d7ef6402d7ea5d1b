#!/usr/bin/env python3

import math
from typing import ClassVar, Optional, Tuple, TypeAlias, Union

import numpy as np

from ..logger import get_logger
from ..note_types import CanonicalNote
from ..note_utils import (
    DEFAULT_OCTAVE_RANGE,
    is_valid_note_number,
    note_number_to_note,
    note_to_note_number,
    octave_range_to_note_numbers,
    parse_note_string,
)

logger = get_logger(__name__)


class FrequencyService:
    """Equal-tempered conversions between Hz and canonical notes."""

    # Type aliases
    Frequency: TypeAlias = float

    DEFAULT_REFERENCE_NOTE: ClassVar[str] = "A4"
    DEFAULT_REFERENCE_FREQUENCY: ClassVar[Frequency] = 440.0
    SEMITONES_PER_OCTAVE: ClassVar[int] = 12

    def __init__(
        self,
        reference_note: Union[str, CanonicalNote] = DEFAULT_REFERENCE_NOTE,
        reference_frequency: Frequency = DEFAULT_REFERENCE_FREQUENCY,
        octave_range: Tuple[int, int] = DEFAULT_OCTAVE_RANGE,
    ) -> None:
        """Initialize the service.

        Args:
            reference_note: Note that sounds at ``reference_frequency``
            reference_frequency: Tuning reference in Hz (A4 = 440 by default)
            octave_range: Lowest and highest octave accepted from measured
                frequencies, from C of the first to C of the last

        Raises:
            NoteParseError: If ``reference_note`` is not a note
            ValueError: If ``reference_frequency`` is not a positive number or
                the octave range is reversed
        """
        if isinstance(reference_note, str):
            reference_note = parse_note_string(reference_note)
        if not np.isfinite(reference_frequency) or reference_frequency <= 0:
            raise ValueError(
                f"Reference frequency must be positive, got {reference_frequency}"
            )
        self._reference_note = reference_note
        self._reference_frequency = float(reference_frequency)
        self._reference_number = note_to_note_number(reference_note)
        self._octave_range = (int(octave_range[0]), int(octave_range[1]))
        self._lowest, self._highest = octave_range_to_note_numbers(octave_range)

    @property
    def reference_note(self) -> CanonicalNote:
        return self._reference_note

    @property
    def reference_frequency(self) -> Frequency:
        return self._reference_frequency

    @property
    def octave_range(self) -> Tuple[int, int]:
        return self._octave_range

    def frequency_to_note_number(self, frequency: Frequency) -> Optional[int]:
        """Round a frequency to the nearest note number.

        Returns:
            The note number, or None for non-positive or non-finite input
        """
        if not isinstance(frequency, (int, float, np.number)) or not np.isfinite(
            frequency
        ):
            logger.debug(f"Invalid frequency value: {frequency}")
            return None

        if frequency <= 0:
            logger.debug(f"Non-positive frequency: {frequency}")
            return None

        n = self.SEMITONES_PER_OCTAVE * math.log2(
            frequency / self._reference_frequency
        )
        # Round half up
        return int(math.floor(n + self._reference_number + 0.5))

    def frequency_to_note(self, frequency: Frequency) -> Optional[CanonicalNote]:
        """Convert a frequency in Hz to the nearest canonical note.

        Args:
            frequency: The frequency in Hz to convert

        Returns:
            CanonicalNote, or None if the frequency is not positive or lands
            outside the sane note number window (an expected artifact of
            noisy input, not an error)
        """
        note_num = self.frequency_to_note_number(frequency)
        if note_num is None:
            return None

        if not is_valid_note_number(note_num, self._lowest, self._highest):
            logger.debug(
                f"Note number {note_num} out of range for frequency {frequency}"
            )
            return None

        return note_number_to_note(note_num)

    def note_to_frequency(self, note: CanonicalNote) -> Frequency:
        """Equal-tempered frequency of a note (A4 -> 440.0)."""
        semitones = note_to_note_number(note) - self._reference_number
        return self._reference_frequency * 2.0 ** (
            semitones / self.SEMITONES_PER_OCTAVE
        )

    def cents_off(self, frequency: Frequency, note: CanonicalNote) -> float:
        """Distance of ``frequency`` from ``note`` in cents."""
        return 1200.0 * math.log2(frequency / self.note_to_frequency(note))


_default_service = FrequencyService()


def frequency_to_note(frequency: float) -> Optional[CanonicalNote]:
    """Convert a frequency to a note against A4 = 440 Hz."""
    return _default_service.frequency_to_note(frequency)


def note_to_frequency(note: CanonicalNote) -> float:
    """Frequency of a note against A4 = 440 Hz."""
    return _default_service.note_to_frequency(note)
