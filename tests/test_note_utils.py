import unittest

import pytest

from note_sight.errors import NoteParseError
from note_sight.note_types import SHARP_NOTES, CanonicalNote, StaffPlacement
from note_sight.note_utils import (
    note_number_to_note,
    note_to_note_number,
    parse_note_string,
    place_on_grand_staff,
    transpose,
    try_parse_note,
)


class TestNoteNumbers(unittest.TestCase):
    def test_reference_points(self):
        self.assertEqual(note_to_note_number(CanonicalNote("C", 4)), 60)
        self.assertEqual(note_to_note_number(CanonicalNote("A", 4)), 69)
        self.assertEqual(note_to_note_number(CanonicalNote("C", -1)), 0)
        self.assertEqual(note_to_note_number(CanonicalNote("C", 9)), 120)

    def test_round_trip_over_sane_range(self):
        for n in range(0, 121):
            self.assertEqual(note_to_note_number(note_number_to_note(n)), n)

    def test_note_round_trip_for_octaves_minus_one_to_nine(self):
        for octave in range(-1, 10):
            for pitch_class in SHARP_NOTES:
                note = CanonicalNote(pitch_class, octave)
                self.assertEqual(note_number_to_note(note_to_note_number(note)), note)

    def test_negative_note_numbers_floor(self):
        self.assertEqual(note_number_to_note(-1), CanonicalNote("B", -2))
        self.assertEqual(note_number_to_note(-12), CanonicalNote("C", -2))

    def test_property_matches_function(self):
        note = CanonicalNote("F#", 2)
        self.assertEqual(note.note_number, note_to_note_number(note))

    def test_ordering_follows_pitch(self):
        self.assertLess(CanonicalNote("B", 3), CanonicalNote("C", 4))
        self.assertGreater(CanonicalNote("C#", 4), CanonicalNote("C", 4))

    def test_rejects_flat_pitch_class(self):
        with self.assertRaises(ValueError):
            CanonicalNote("Bb", 3)


class TestParseNoteString(unittest.TestCase):
    def test_sharps(self):
        self.assertEqual(parse_note_string("C#4"), CanonicalNote("C#", 4))
        self.assertEqual(str(parse_note_string("A4")), "A4")

    def test_flats_normalize_to_sharps(self):
        self.assertEqual(str(parse_note_string("Bb3")), "A#3")
        self.assertEqual(str(parse_note_string("Db2")), "C#2")
        self.assertEqual(str(parse_note_string("Eb5")), "D#5")
        self.assertEqual(str(parse_note_string("Gb1")), "F#1")
        self.assertEqual(str(parse_note_string("Ab0")), "G#0")

    def test_spellings_across_letter_boundaries(self):
        self.assertEqual(str(parse_note_string("Cb4")), "B3")
        self.assertEqual(str(parse_note_string("B#3")), "C4")
        self.assertEqual(str(parse_note_string("Fb2")), "E2")
        self.assertEqual(str(parse_note_string("E#2")), "F2")

    def test_signed_octaves(self):
        self.assertEqual(parse_note_string("C-1"), CanonicalNote("C", -1))
        self.assertEqual(parse_note_string("G+3"), CanonicalNote("G", 3))

    def test_lowercase_letter(self):
        self.assertEqual(parse_note_string("f#3"), CanonicalNote("F#", 3))

    def test_try_parse_returns_none(self):
        self.assertIsNone(try_parse_note("H2"))
        self.assertIsNone(try_parse_note(None))
        self.assertEqual(try_parse_note("Bb3"), CanonicalNote("A#", 3))


@pytest.mark.parametrize(
    "text", ["H2", "", "C", "C#", "#4", "Cx4", "C##4", "4C", "C4.5", "Bb", None, 440]
)
def test_malformed_notes_raise(text):
    with pytest.raises(NoteParseError):
        parse_note_string(text)


def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_note_string("H2")


class TestTranspose(unittest.TestCase):
    def test_octave_carry(self):
        self.assertEqual(transpose(CanonicalNote("B", 3), 1), CanonicalNote("C", 4))
        self.assertEqual(transpose(CanonicalNote("C", 4), -1), CanonicalNote("B", 3))

    def test_octave_up(self):
        self.assertEqual(transpose(CanonicalNote("E", 1), 12), CanonicalNote("E", 2))

    def test_zero_is_identity(self):
        note = CanonicalNote("G#", 2)
        self.assertEqual(transpose(note, 0), note)

    def test_inverse(self):
        for n in range(0, 121, 7):
            note = note_number_to_note(n)
            for k in (-30, -13, -12, -1, 1, 5, 12, 25):
                self.assertEqual(transpose(transpose(note, k), -k), note)


class TestGrandStaff(unittest.TestCase):
    def test_a4_goes_on_treble_an_octave_up(self):
        placement = place_on_grand_staff(CanonicalNote("A", 4))
        self.assertEqual(placement.clef, StaffPlacement.TREBLE)
        self.assertEqual(placement.note, CanonicalNote("A", 5))
        self.assertEqual(placement.key, "a/5")
        self.assertIsNone(placement.accidental)

    def test_octave_three_lands_on_treble_after_shift(self):
        placement = place_on_grand_staff(CanonicalNote("C", 3))
        self.assertEqual(placement.clef, StaffPlacement.TREBLE)
        self.assertEqual(placement.note, CanonicalNote("C", 4))

    def test_low_bass_notes_use_bass_clef(self):
        placement = place_on_grand_staff(CanonicalNote("E", 1))
        self.assertEqual(placement.clef, StaffPlacement.BASS)
        self.assertEqual(placement.key, "e/2")

    def test_b2_stays_on_bass(self):
        self.assertEqual(place_on_grand_staff(CanonicalNote("B", 2)).clef, "bass")

    def test_sharps_carry_accidental(self):
        placement = place_on_grand_staff(CanonicalNote("C#", 4))
        self.assertEqual(placement.accidental, "#")
        self.assertEqual(placement.key, "c#/5")

    def test_custom_shift(self):
        placement = place_on_grand_staff(CanonicalNote("C", 4), octave_shift=0)
        self.assertEqual(placement.clef, "treble")
        self.assertEqual(placement.note, CanonicalNote("C", 4))


if __name__ == "__main__":
    unittest.main()
