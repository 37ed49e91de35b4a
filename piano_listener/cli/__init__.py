"""Command-line interface for Piano Listener."""

from .main import main

__all__ = ["main"]
