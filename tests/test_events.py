import unittest

from piano_listener.core.events import DetectionEvents, DetectionEventType, EventEmitter


class TestEventEmitter(unittest.TestCase):
    def test_emit_calls_listeners(self):
        emitter = EventEmitter()
        received = []
        emitter.on(DetectionEventType.NOTE_DETECTED, received.append)
        emitter.emit(DetectionEventType.NOTE_DETECTED, "A4")
        emitter.emit(DetectionEventType.SILENCE, 1.0)
        self.assertEqual(received, ["A4"])

    def test_duplicate_listener_registered_once(self):
        emitter = EventEmitter()
        received = []
        emitter.on("event", received.append)
        emitter.on("event", received.append)
        self.assertEqual(emitter.listener_count("event"), 1)
        emitter.emit("event", 1)
        self.assertEqual(received, [1])

    def test_failing_listener_does_not_stop_others(self):
        emitter = EventEmitter()
        received = []

        def broken(_value):
            raise RuntimeError("boom")

        emitter.on("event", broken)
        emitter.on("event", received.append)
        emitter.emit("event", 2)
        self.assertEqual(received, [2])

    def test_clear(self):
        emitter = EventEmitter()
        received = []
        emitter.on("event", received.append)
        emitter.clear()
        emitter.emit("event", 3)
        self.assertEqual(received, [])
        self.assertEqual(emitter.listener_count("event"), 0)


class TestDetectionEvents(unittest.TestCase):
    def test_note_and_silence_channels(self):
        events = DetectionEvents()
        notes, silences = [], []
        events.on_note_detected(notes.append)
        events.on_silence(silences.append)

        events.emit_note_detected("A4")
        events.emit_silence(0.5)

        self.assertEqual(notes, ["A4"])
        self.assertEqual(silences, [0.5])

        events.clear()
        events.emit_note_detected("B4")
        self.assertEqual(notes, ["A4"])


if __name__ == "__main__":
    unittest.main()
