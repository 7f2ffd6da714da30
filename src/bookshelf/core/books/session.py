"""Library session: wires store, UI state, filters and commands together."""

from dataclasses import dataclass, replace
from typing import Any, Optional

import structlog

from bookshelf.api.schemas.books import Book
from bookshelf.config import Settings, get_settings
from bookshelf.core.books.commands import CommandOutcome, LibraryCommands
from bookshelf.core.books.projection import Counts, FilterState, count, empty_hint, project
from bookshelf.core.books.remote import BooksResource
from bookshelf.core.books.store import CollectionStore
from bookshelf.core.books.ui_state import (
    EditorState,
    Notification,
    NotificationCenter,
    NotificationSink,
    TransientUIState,
)
from bookshelf.core.errors import MissingRecordError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LibraryView:
    """Everything the presentation layer needs to draw one frame."""
    books: list[Book]
    counts: Counts
    filters: FilterState
    loading: bool
    editor: EditorState
    pending_delete: Optional[str]
    notification: Optional[Notification]
    empty_hint: str


class LibrarySession:
    """One user's library: the callable intents behind the UI."""

    def __init__(
        self,
        remote: BooksResource,
        settings: Optional[Settings] = None,
        sinks: Optional[list[NotificationSink]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.remote = remote
        self.store = CollectionStore()
        self.ui = TransientUIState(
            NotificationCenter(duration=self.settings.notification_duration, sinks=sinks)
        )
        self.filters = FilterState()
        self.loading = remote.configured
        self.commands = LibraryCommands(
            remote=remote,
            store=self.store,
            ui=self.ui,
            placeholder_cover_url=self.settings.placeholder_cover_url,
            guard_stale_responses=self.settings.guard_stale_responses,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "LibrarySession":
        """Build a session talking to the configured books endpoint."""
        settings = settings or get_settings()
        remote = BooksResource(settings.books_api_url, timeout=settings.request_timeout)
        return cls(remote, settings=settings)

    async def start(self) -> CommandOutcome:
        """Initial load; failures leave an empty collection and a notification."""
        self.loading = self.remote.configured
        try:
            return await self.commands.load()
        finally:
            self.loading = False

    async def close(self) -> None:
        self.ui.notifications.dismiss()
        await self.remote.close()

    # --- View ---

    def view(self) -> LibraryView:
        books = self.store.list()
        return LibraryView(
            books=project(books, self.filters),
            counts=count(books),
            filters=self.filters,
            loading=self.loading,
            editor=self.ui.editor,
            pending_delete=self.ui.pending_delete,
            notification=self.ui.notification,
            empty_hint=empty_hint(self.filters),
        )

    # --- Filters ---

    def set_filters(self, query_text: Optional[str] = None, favorites_only: Optional[bool] = None) -> FilterState:
        changes: dict[str, Any] = {}
        if query_text is not None:
            changes["query_text"] = query_text
        if favorites_only is not None:
            changes["favorites_only"] = favorites_only
        self.filters = replace(self.filters, **changes)
        return self.filters

    def set_query(self, query_text: str) -> FilterState:
        return self.set_filters(query_text=query_text)

    def clear_query(self) -> FilterState:
        return self.set_filters(query_text="")

    def toggle_favorites_only(self) -> FilterState:
        return self.set_filters(favorites_only=not self.filters.favorites_only)

    # --- Editor ---

    def open_create(self) -> EditorState:
        return self.ui.open_create()

    def open_edit(self, book_id: str) -> EditorState:
        book = self.store.get(book_id)
        if book is None:
            logger.warning("Edit requested for unknown book", book_id=book_id)
            raise MissingRecordError(book_id)
        return self.ui.open_edit(book)

    def edit_draft(self, **fields: Any) -> EditorState:
        self.ui.update_draft(**fields)
        return self.ui.editor

    def cancel_edit(self) -> None:
        self.ui.close_editor()

    async def save(self) -> CommandOutcome:
        return await self.commands.save()

    # --- Favorites / delete ---

    async def toggle_favorite(self, book_id: str) -> CommandOutcome:
        return await self.commands.toggle_favorite(book_id)

    def ask_delete(self, book_id: str) -> None:
        self.commands.request_delete(book_id)

    def cancel_delete(self) -> None:
        self.commands.cancel_delete()

    async def confirm_delete(self) -> CommandOutcome:
        return await self.commands.confirm_delete()

    def dismiss_notification(self) -> None:
        self.ui.notifications.dismiss()


# Singleton instance
_session: LibrarySession | None = None


def get_library_session() -> LibrarySession:
    """Get or create the library session singleton."""
    global _session
    if _session is None:
        _session = LibrarySession.from_settings()
    return _session


def set_library_session(session: LibrarySession | None) -> None:
    """Install a session as the singleton; None makes the next call build a fresh one."""
    global _session
    _session = session
