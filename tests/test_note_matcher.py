import unittest

from piano_listener.note_matcher import NoteMatcher
from piano_listener.note_table import NoteTable
from piano_listener.note_types import Note


class TestNoteMatcher(unittest.TestCase):
    def setUp(self):
        self.table = NoteTable.build()
        self.matcher = NoteMatcher(self.table)

    def test_exact_frequencies(self):
        for note in self.table:
            self.assertIs(self.matcher.nearest(note.frequency), note)

    def test_halfway_prefers_lower_note(self):
        # Exact midpoints on the generated table are not representable: for
        # pairs such as C#2-D2 or E4-F4 the rounded (a + b) / 2 lands nearer
        # the upper note. Frequencies with exact binary midpoints exercise
        # the tie itself.
        matcher = NoteMatcher(NoteTable([Note("A3", 220.0), Note("A4", 440.0), Note("A5", 880.0)]))
        self.assertEqual(matcher.nearest(330.0).name, "A3")
        self.assertEqual(matcher.nearest(660.0).name, "A4")

    def test_just_around_midpoints(self):
        for lower, upper in zip(self.table, list(self.table)[1:]):
            midpoint = (lower.frequency + upper.frequency) / 2
            self.assertIs(self.matcher.nearest(midpoint * (1 - 1e-9)), lower)
            self.assertIs(self.matcher.nearest(midpoint * (1 + 1e-9)), upper)

    def test_out_of_range(self):
        self.assertEqual(self.matcher.nearest(0.0).name, "C2")
        self.assertEqual(self.matcher.nearest(10.0).name, "C2")
        self.assertEqual(self.matcher.nearest(5000.0).name, "C7")

    def test_detuned_notes(self):
        self.assertEqual(self.matcher.nearest(430.66).name, "A4")
        self.assertEqual(self.matcher.nearest(215.33).name, "A3")
        self.assertEqual(self.matcher.nearest(882.86).name, "A5")

    def test_cents_off(self):
        self.assertAlmostEqual(self.matcher.cents_off(440.0), 0.0)
        self.assertAlmostEqual(self.matcher.cents_off(440.0 * 2 ** (10 / 1200)), 10.0)
        self.assertAlmostEqual(self.matcher.cents_off(440.0 * 2 ** (-25 / 1200)), -25.0)
        self.assertEqual(self.matcher.cents_off(0.0), 0.0)


if __name__ == "__main__":
    unittest.main()
