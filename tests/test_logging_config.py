import logging
import sys

import pytest

from piano_listener.detection.harmonic_corrector import HarmonicCorrector
from piano_listener.logging_config import MODULE_LOG_LEVELS, setup_logging
from piano_listener.note_matcher import NoteMatcher
from piano_listener.note_table import NoteTable

pytestmark = pytest.mark.usefixtures("restore_logging")

BIN_WIDTH = 44100 / 2048


def test_module_levels_applied():
    setup_logging()
    for name, level in MODULE_LOG_LEVELS.items():
        assert logging.getLogger(name).level == level


def test_level_override_reaches_module_loggers():
    setup_logging("DEBUG")
    corrector_logger = logging.getLogger("piano_listener.detection.harmonic_corrector")
    assert corrector_logger.isEnabledFor(logging.DEBUG)
    # The root logger keeps its own level
    assert logging.getLogger().level == logging.ERROR

    setup_logging("INFO")
    assert not corrector_logger.isEnabledFor(logging.DEBUG)


def test_invalid_level_keeps_defaults():
    setup_logging("LOUD")
    assert logging.getLogger("piano_listener").level == logging.INFO


def test_records_go_to_stderr(capsys):
    setup_logging("DEBUG")
    handler = logging.getLogger("piano_listener").handlers[0]
    assert handler.stream is sys.stderr

    corrector = HarmonicCorrector(NoteMatcher(NoteTable.build()), BIN_WIDTH)
    corrector.correct(41 * BIN_WIDTH, 10.0)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "piano_listener.detection.harmonic_corrector - DEBUG - Harmonic correction" in captured.err


def test_repeated_setup_keeps_one_handler():
    setup_logging()
    setup_logging()
    assert len(logging.getLogger("piano_listener.detection").handlers) == 1
