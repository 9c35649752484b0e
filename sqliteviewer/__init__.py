"""Generic data-access layer for browsing and editing a SQLite file."""

__version__ = "0.1.0"
