"""Download images linked from text files into per-file folders."""

__version__ = "1.0.0"
