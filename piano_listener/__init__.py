"""Piano Listener - real-time piano note detection from a microphone."""

__version__ = "0.1.0"
