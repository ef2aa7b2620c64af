"""Draft Sync - real-time draft room client engine."""

__version__ = "0.1.0"
