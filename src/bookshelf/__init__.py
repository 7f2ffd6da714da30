"""Bookshelf - keeps a local book collection in sync with a remote REST resource."""

__version__ = "1.0.0"
