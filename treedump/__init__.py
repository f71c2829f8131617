"""treedump: dump a directory tree into a single text file."""

__version__ = "1.0.0"
