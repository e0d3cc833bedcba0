"""A command line to-do tracker backed by a JSON journal file."""

__version__ = "0.1.0"
