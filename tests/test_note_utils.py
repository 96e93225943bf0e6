import unittest

from violin_tuner.note_utils import format_cents, get_note_name


class TestScientificPitchNotation(unittest.TestCase):
    def test_open_strings(self):
        # Violin open strings G3, D4, A4, E5
        self.assertEqual(get_note_name(196.0), "G3")
        self.assertEqual(get_note_name(293.66), "D4")
        self.assertEqual(get_note_name(440.0), "A4")
        self.assertEqual(get_note_name(659.26), "E5")

    def test_octave_transitions(self):
        # B3 -> C4
        self.assertEqual(get_note_name(246.94), "B3")
        self.assertEqual(get_note_name(261.63), "C4")

    def test_sharps_and_flats(self):
        self.assertEqual(get_note_name(277.18), "C#4")
        self.assertEqual(get_note_name(277.18, use_flats=True), "Db4")
        self.assertEqual(get_note_name(311.13, use_flats=True), "Eb4")
        self.assertEqual(get_note_name(329.63, use_flats=True), "E4")

    def test_reference_pitch(self):
        self.assertEqual(get_note_name(442.0, reference=442.0), "A4")
        self.assertEqual(get_note_name(415.0, reference=415.0), "A4")

    def test_no_pitch(self):
        self.assertEqual(get_note_name(0.0), "---")


class TestFormatCents(unittest.TestCase):
    def test_format(self):
        self.assertEqual(format_cents(12.3), "+12 cents")
        self.assertEqual(format_cents(-7.6), "-8 cents")
        self.assertEqual(format_cents(0.2), "0 cents")
        self.assertEqual(format_cents(-0.4), "0 cents")


if __name__ == "__main__":
    unittest.main()
