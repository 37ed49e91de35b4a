"""Reporters printing detections on the console.

Detections arrive on the audio thread. They are queued there and printed
from the main thread, so the audio callback never waits on the terminal.
"""

import queue
from collections import Counter
from typing import Callable, List, Optional

import click
import pyfiglet

from ..note_matcher import NoteMatcher
from ..note_types import DetectionResult

Reporter = Callable[[DetectionResult], None]


class ReportQueue:
    """Hands detections from the audio thread to the reporters."""

    def __init__(self, reporters: Optional[List[Reporter]] = None) -> None:
        self._queue: "queue.Queue[DetectionResult]" = queue.Queue()
        self._reporters: List[Reporter] = list(reporters or [])

    def add_reporter(self, reporter: Reporter) -> None:
        self._reporters.append(reporter)

    def enqueue(self, result: DetectionResult) -> None:
        """Listener for the detection service; never blocks."""
        self._queue.put_nowait(result)

    def process_events(self) -> int:
        """Report every queued detection. Call from the main thread.

        Returns:
            Number of detections reported
        """
        handled = 0
        while True:
            try:
                result = self._queue.get_nowait()
            except queue.Empty:
                return handled
            for reporter in self._reporters:
                reporter(result)
            handled += 1


class ConsoleReporter:
    """Prints detections as a status line.

    The default mode rewrites a single line in place. Verbose mode prints one
    line per block, with the tuning offset and octave corrections.
    """

    def __init__(self, matcher: Optional[NoteMatcher] = None, verbose: bool = False) -> None:
        self._matcher = matcher
        self._verbose = verbose

    def format(self, result: DetectionResult) -> str:
        name, note_frequency, raw_frequency, magnitude = result.as_report()
        line = (
            f"Detected: {name} ({note_frequency:.2f} Hz) | "
            f"Raw Freq: {raw_frequency:.2f} Hz | Magnitude: {magnitude:.4f}"
        )
        if self._verbose:
            if self._matcher is not None:
                cents = self._matcher.cents_off(result.corrected_frequency)
                line += f" | {cents:+.0f} cents"
            if result.harmonic_corrected:
                line += " | octave corrected"
        return line

    def __call__(self, result: DetectionResult) -> None:
        if self._verbose:
            click.echo(self.format(result))
        else:
            click.echo(f"\r{self.format(result)}    ", nl=False)


class BannerReporter:
    """Prints the note name in large letters whenever it changes."""

    def __init__(self, font: str = "standard") -> None:
        self._font = font
        self._last_note: Optional[str] = None

    def __call__(self, result: DetectionResult) -> None:
        if result.note_name == self._last_note:
            return
        self._last_note = result.note_name
        click.echo("\n" + pyfiglet.figlet_format(result.note_name, font=self._font))


class DetectionSummary:
    """Counts detections per note for the end-of-session summary."""

    def __init__(self) -> None:
        self._counts: Counter = Counter()

    def __call__(self, result: DetectionResult) -> None:
        self._counts[result.note_name] += 1

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def most_common(self, n: Optional[int] = None):
        return self._counts.most_common(n)

    def render(self) -> List[str]:
        """Summary lines, most frequent note first."""
        if not self._counts:
            return ["No notes were detected."]
        lines = [f"Total blocks with a note: {self.total}", "Note statistics:"]
        for note_name, count in self._counts.most_common():
            lines.append(f"  {note_name}: {count} detections")
        return lines
