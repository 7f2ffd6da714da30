"""API schemas."""

from bookshelf.api.schemas.books import Book, BookDraft, DraftUpdate

__all__ = ["Book", "BookDraft", "DraftUpdate"]
