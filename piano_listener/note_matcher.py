import numpy as np

from .note_table import NoteTable
from .note_types import Note


class NoteMatcher:
    """
    Maps frequencies to the nearest note of a note table.

    When a frequency is exactly halfway between two notes the lower note
    wins: ``np.argmin`` keeps the first minimum it meets and the table is
    sorted in ascending order.
    """

    def __init__(self, note_table: NoteTable) -> None:
        self._note_table = note_table
        self._frequencies = note_table.frequencies

    @property
    def note_table(self) -> NoteTable:
        return self._note_table

    def nearest(self, frequency: float) -> Note:
        """
        Find the note whose reference frequency is closest to ``frequency``.

        Args:
            frequency: Frequency in Hz (any finite value, including 0)
        Returns:
            Note: The nearest note. Never fails, the table is never empty.
        """
        index = int(np.argmin(np.abs(self._frequencies - frequency)))
        return self._note_table[index]

    def cents_off(self, frequency: float) -> float:
        """
        Deviation of ``frequency`` from its nearest note, in cents.

        Positive values are sharp, negative values flat. Non-positive
        frequencies have no defined pitch and return 0.
        """
        if frequency <= 0:
            return 0.0
        note = self.nearest(frequency)
        return float(1200.0 * np.log2(frequency / note.frequency))
