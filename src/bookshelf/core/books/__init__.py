"""Book collection synchronization module."""

from bookshelf.core.books.commands import CommandOutcome, LibraryCommands, OperationStatus
from bookshelf.core.books.projection import FilterState, count, project
from bookshelf.core.books.remote import BooksResource
from bookshelf.core.books.session import LibrarySession, get_library_session
from bookshelf.core.books.store import CollectionStore
from bookshelf.core.books.ui_state import NotificationCenter, NotificationKind, TransientUIState

__all__ = [
    "BooksResource",
    "CollectionStore",
    "CommandOutcome",
    "FilterState",
    "LibraryCommands",
    "LibrarySession",
    "NotificationCenter",
    "NotificationKind",
    "OperationStatus",
    "TransientUIState",
    "count",
    "get_library_session",
    "project",
]
