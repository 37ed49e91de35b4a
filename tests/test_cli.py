import importlib
import re
import threading
from contextlib import contextmanager

import numpy as np
import pytest
import soundfile as sf
from click.testing import CliRunner

from piano_listener.cli.main import main
from piano_listener.cli.reporters import (
    BannerReporter,
    ConsoleReporter,
    DetectionSummary,
    ReportQueue,
)
from piano_listener.note_matcher import NoteMatcher
from piano_listener.note_table import NoteTable
from piano_listener.note_types import DetectionResult

# The cli package re-exports the click group under the module's name
cli_main = importlib.import_module("piano_listener.cli.main")

pytestmark = pytest.mark.usefixtures("restore_logging")


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def table():
    return NoteTable.build()


def make_result(table, name, raw_frequency, corrected_frequency=None):
    return DetectionResult(
        note=table.by_name(name),
        raw_frequency=raw_frequency,
        magnitude=12.3456,
        corrected_frequency=corrected_frequency or raw_frequency,
    )


def invoke(runner, tmp_path, *args):
    return runner.invoke(main, ["--config-dir", str(tmp_path / "config"), *args])


def test_tone_then_analyze(runner, tmp_path):
    wav = tmp_path / "a3.wav"
    result = invoke(runner, tmp_path, "tone", "A3", str(wav), "--duration", "0.5")
    assert result.exit_code == 0, result.output
    assert "A3 (220.00 Hz)" in result.output
    assert sf.info(str(wav)).samplerate == 44100

    result = invoke(runner, tmp_path, "analyze", str(wav))
    assert result.exit_code == 0, result.output
    assert "Detected: A3 (220.00 Hz)" in result.output
    assert "Analyzed 11 blocks" in result.output
    assert "A3: " in result.output


def test_analyze_octave_corrected_tone(runner, tmp_path):
    wav = tmp_path / "a4.wav"
    invoke(runner, tmp_path, "tone", "A4", str(wav), "--amplitude", "0.2", "--harmonic", "0.8")

    result = invoke(runner, tmp_path, "analyze", "--verbose", str(wav))
    assert result.exit_code == 0, result.output
    assert "Detected: A4 (440.00 Hz)" in result.output
    assert "octave corrected" in result.output


def test_analyze_loop_stops_on_interrupt(runner, tmp_path, monkeypatch):
    wav = tmp_path / "a3.wav"
    invoke(runner, tmp_path, "tone", "A3", str(wav), "--duration", "0.1")

    interrupted = threading.Event()
    interrupted.set()

    @contextmanager
    def already_interrupted():
        yield interrupted

    monkeypatch.setattr(cli_main, "_stop_on_interrupt", already_interrupted)
    result = invoke(runner, tmp_path, "analyze", "--loop", str(wav))
    assert result.exit_code == 0, result.output
    assert re.search(r"Analyzed \d+ blocks from .* in \d+\.\d\ds", result.output)


def test_analyze_silence(runner, tmp_path):
    wav = tmp_path / "silence.wav"
    sf.write(str(wav), np.zeros(4096, dtype=np.float32), 44100)

    result = invoke(runner, tmp_path, "analyze", str(wav))
    assert result.exit_code == 0, result.output
    assert "No notes were detected." in result.output


def test_analyze_wrong_sample_rate(runner, tmp_path):
    wav = tmp_path / "low.wav"
    sf.write(str(wav), np.zeros(4096, dtype=np.float32), 22050)

    result = invoke(runner, tmp_path, "analyze", str(wav))
    assert result.exit_code == 1
    assert "expected 44100Hz" in result.output


def test_analyze_missing_file(runner, tmp_path):
    result = invoke(runner, tmp_path, "analyze", str(tmp_path / "missing.wav"))
    assert result.exit_code == 2


def test_unknown_note(runner, tmp_path):
    result = invoke(runner, tmp_path, "tone", "H2", str(tmp_path / "h2.wav"))
    assert result.exit_code == 2
    assert "not in the table" in result.output


def test_console_reporter_line(table, capsys):
    reporter = ConsoleReporter()
    reporter(make_result(table, "A4", 430.66))
    out = capsys.readouterr().out
    assert out == "\rDetected: A4 (440.00 Hz) | Raw Freq: 430.66 Hz | Magnitude: 12.3456    "


def test_console_reporter_verbose(table):
    reporter = ConsoleReporter(NoteMatcher(table), verbose=True)
    line = reporter.format(make_result(table, "A4", 882.86, 441.43))
    assert line.startswith("Detected: A4 (440.00 Hz) | Raw Freq: 882.86 Hz")
    assert "+6 cents" in line
    assert line.endswith("octave corrected")


def test_banner_only_on_change(table, capsys):
    reporter = BannerReporter()
    reporter(make_result(table, "C4", 258.4))
    first = capsys.readouterr().out
    reporter(make_result(table, "C4", 258.4))
    assert capsys.readouterr().out == ""
    reporter(make_result(table, "D4", 301.5))
    assert capsys.readouterr().out.strip()
    assert first.strip()


def test_report_queue_and_summary(table):
    summary = DetectionSummary()
    seen = []
    reports = ReportQueue([summary])
    reports.add_reporter(seen.append)

    for name in ["A3", "A3", "C4"]:
        reports.enqueue(make_result(table, name, 200.0))
    assert seen == []

    assert reports.process_events() == 3
    assert [r.note_name for r in seen] == ["A3", "A3", "C4"]
    assert summary.total == 3
    assert summary.most_common(1) == [("A3", 2)]
    assert summary.render() == [
        "Total blocks with a note: 3",
        "Note statistics:",
        "  A3: 2 detections",
        "  C4: 1 detections",
    ]
    assert reports.process_events() == 0
