"""notemerge - merge plain-text notes while keeping their links intact."""

__version__ = "0.1.0"
