"""Equal-tempered reference note table."""

from __future__ import annotations
import logging
import numpy as np
from typing import ClassVar, Dict, Iterator, List, Sequence, Tuple

from .note_types import Note

logger = logging.getLogger(__name__)


class NoteTable:
    """Immutable, ascending table of reference notes.

    The default table holds 61 notes (C2 to C7) around the A4 = 440 Hz
    reference. It is built once and shared read-only by every component
    that classifies frequencies.
    """

    # Chromatic name cycle, starting at C
    NOTE_NAMES: ClassVar[List[str]] = [
        "C",
        "C#",
        "D",
        "D#",
        "E",
        "F",
        "F#",
        "G",
        "G#",
        "A",
        "A#",
        "B",
    ]

    NOTE_COUNT: ClassVar[int] = 61  # 5 octaves plus the closing C
    LOWEST_OCTAVE: ClassVar[int] = 2
    REFERENCE_FREQUENCY: ClassVar[float] = 440.0  # A4
    REFERENCE_OFFSET: ClassVar[int] = 33  # Semitones from C2 up to A4

    def __init__(self, notes: Sequence[Note]) -> None:
        """Wrap an ascending sequence of notes.

        Args:
            notes: Notes sorted by strictly increasing frequency

        Raises:
            ValueError: If the sequence is empty or not strictly ascending
        """
        if not notes:
            raise ValueError("A note table needs at least one note")

        frequencies = np.array([note.frequency for note in notes], dtype=np.float64)
        if np.any(np.diff(frequencies) <= 0):
            raise ValueError("Note frequencies must be strictly increasing")
        frequencies.flags.writeable = False

        self._notes: Tuple[Note, ...] = tuple(notes)
        self._frequencies = frequencies
        self._by_name: Dict[str, Note] = {note.name: note for note in self._notes}

    @classmethod
    def build(
        cls,
        reference_frequency: float = REFERENCE_FREQUENCY,
        reference_offset: int = REFERENCE_OFFSET,
    ) -> NoteTable:
        """Generate the equal-tempered table around a reference pitch.

        Entry ``i`` sits ``i - reference_offset`` semitones away from the
        reference, so its frequency is ``reference * 2 ** (n / 12)``.

        Args:
            reference_frequency: Frequency of the reference note in Hz
            reference_offset: Index of the reference note in the table

        Returns:
            A fresh note table
        """
        notes = []
        for i in range(cls.NOTE_COUNT):
            semitones = i - reference_offset
            frequency = reference_frequency * 2.0 ** (semitones / 12.0)
            octave = cls.LOWEST_OCTAVE + i // 12
            name = f"{cls.NOTE_NAMES[i % 12]}{octave}"
            notes.append(Note(name=name, frequency=frequency))

        table = cls(notes)
        logger.info(
            f"Note table built: {len(table)} notes, "
            f"{table.lowest} to {table.highest}"
        )
        return table

    @property
    def frequencies(self) -> np.ndarray:
        """Read-only array of the note frequencies, in table order."""
        return self._frequencies

    @property
    def lowest(self) -> Note:
        return self._notes[0]

    @property
    def highest(self) -> Note:
        return self._notes[-1]

    def by_name(self, name: str) -> Note:
        """Look up a note by name (e.g., 'A4').

        Raises:
            KeyError: If the note is not part of the table
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Note '{name}' is not in the table") from None

    def index_of(self, note: Note) -> int:
        return self._notes.index(note)

    def __len__(self) -> int:
        return len(self._notes)

    def __getitem__(self, index: int) -> Note:
        return self._notes[index]

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def __repr__(self):
        return f"NoteTable({len(self)} notes, {self.lowest.name}-{self.highest.name})"
