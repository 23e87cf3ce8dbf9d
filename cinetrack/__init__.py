"""CineTrack - continue watching toolkit for TV shows."""

__version__ = "0.1.0"
