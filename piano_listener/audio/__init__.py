"""Audio sources and the detection service."""
