"""User-initiated operations on the book collection.

Each operation runs validate -> remote call -> store reconcile -> notify.
The store is only touched after the remote resource confirms, so a failed
call leaves it exactly as it was.
"""

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import structlog

from bookshelf.api.schemas.books import Book, BookDraft
from bookshelf.core.books.projection import clamp_rating
from bookshelf.core.books.remote import BooksResource
from bookshelf.core.books.store import CollectionStore
from bookshelf.core.books.ui_state import EditorMode, EditorState, NotificationKind, TransientUIState
from bookshelf.core.errors import BookshelfError, MissingRecordError, TransportError, ValidationError

logger = structlog.get_logger(__name__)

MSG_MISSING_FIELDS = "Please fill Title and Author"
MSG_ADDED = "✅ Book added"
MSG_UPDATED = "✅ Book updated"
MSG_SAVE_FAILED = "❌ Save failed. Check API / network."
MSG_FAVORITED = "❤️ Added to favorites"
MSG_UNFAVORITED = "🤍 Removed from favorites"
MSG_FAVORITE_FAILED = "❌ Failed to update favorite"
MSG_DELETED = "🗑️ Book deleted"
MSG_DELETE_FAILED = "❌ Delete failed"
MSG_LOAD_FAILED = "❌ Cannot load books. Check your API URL."


class OperationStatus(str, Enum):
    """Terminal state of one command invocation."""
    APPLIED = "applied"
    FAILED = "failed"
    SKIPPED = "skipped"  # nothing to do, no call was made
    SUPERSEDED = "superseded"  # confirmed, but a newer call for the book owns the store


@dataclass
class CommandOutcome:
    """Result of a command; commands report errors here instead of raising."""
    operation: str
    status: OperationStatus
    book: Optional[Book] = None
    error: Optional[BookshelfError] = None

    @property
    def ok(self) -> bool:
        return self.status == OperationStatus.APPLIED


def normalize_draft(draft: BookDraft, placeholder_cover_url: str) -> dict[str, Any]:
    """
    Validate a draft and turn it into wire fields.

    Args:
        draft: Staged form values
        placeholder_cover_url: Used when the cover URL is blank

    Returns:
        camelCase fields without ``id`` or ``isFavorite``

    Raises:
        ValidationError: If title or author is blank after trimming
    """
    title = draft.title.strip()
    author = draft.author.strip()
    missing = [name for name, value in (("title", title), ("author", author)) if not value]
    if missing:
        raise ValidationError(MSG_MISSING_FIELDS, fields=missing)

    return {
        "title": title,
        "author": author,
        "coverImage": draft.cover_image.strip() or placeholder_cover_url,
        "description": draft.description.strip(),
        "rating": clamp_rating(draft.rating),
    }


class LibraryCommands:
    """Create, update, toggle-favorite and delete, mediated by the remote resource."""

    def __init__(
        self,
        remote: BooksResource,
        store: CollectionStore,
        ui: TransientUIState,
        placeholder_cover_url: str,
        guard_stale_responses: bool = False,
    ) -> None:
        self._remote = remote
        self._store = store
        self._ui = ui
        self._placeholder = placeholder_cover_url
        self._guard_stale = guard_stale_responses
        self._tokens = itertools.count(1)
        # Per book id: tokens of calls still in flight, token of the last applied
        # call, and a confirmed result held back while a newer call is in flight.
        self._pending: dict[str, set[int]] = {}
        self._applied: dict[str, int] = {}
        self._held: dict[str, tuple[int, Callable[[], Any]]] = {}

    # --- Stale response tracking ---

    def _dispatch(self, book_id: str) -> int:
        token = next(self._tokens)
        self._pending.setdefault(book_id, set()).add(token)
        return token

    def _settle(self, book_id: str, token: int, apply: Optional[Callable[[], Any]] = None) -> bool:
        """
        Retire a call and decide whether its confirmed result reaches the store.

        Args:
            book_id: Book the call targeted
            token: Token returned by ``_dispatch``
            apply: Store mutation for a confirmed call; None when the call failed

        Returns:
            True if ``apply`` ran now
        """
        pending = self._pending.get(book_id, set())
        pending.discard(token)
        applied_now = False

        if apply is None:
            held = self._held.get(book_id)
            if held is not None and not any(other > held[0] for other in pending):
                # The newer call that shadowed this result failed; the server kept it.
                del self._held[book_id]
                held[1]()
                self._applied[book_id] = held[0]
                logger.info("Applying held response", book_id=book_id)
        elif not self._guard_stale:
            apply()
            applied_now = True
        elif self._applied.get(book_id, 0) > token:
            logger.info("Dropping superseded response", book_id=book_id)
        elif any(other > token for other in pending):
            held = self._held.get(book_id)
            if held is None or held[0] < token:
                self._held[book_id] = (token, apply)
            logger.info("Holding response behind a newer call", book_id=book_id)
        else:
            apply()
            applied_now = True

        if applied_now:
            self._applied[book_id] = token
            held = self._held.get(book_id)
            if held is not None and held[0] < token:
                del self._held[book_id]

        if not pending:
            self._pending.pop(book_id, None)
            self._applied.pop(book_id, None)
            self._held.pop(book_id, None)
        return applied_now

    def _editor_for(self, mode: EditorMode, book_id: Optional[str] = None) -> Optional[EditorState]:
        editor = self._ui.editor
        return editor if editor.targets(mode, book_id) else None

    def _close_editor_if_current(self, editor: Optional[EditorState]) -> None:
        if editor is not None and self._ui.editor is editor:
            self._ui.close_editor()

    # --- Load ---

    async def load(self) -> CommandOutcome:
        """Fetch the full collection and replace the store with it."""
        if not self._remote.configured:
            logger.info("No books endpoint configured, skipping load")
            return CommandOutcome("load", OperationStatus.SKIPPED)

        try:
            books = await self._remote.list()
        except TransportError as e:
            logger.error("Book load failed", error=str(e))
            self._ui.notify(MSG_LOAD_FAILED, NotificationKind.ERROR)
            return CommandOutcome("load", OperationStatus.FAILED, error=e)

        self._store.load(books)
        logger.info("Books loaded", count=len(self._store))
        return CommandOutcome("load", OperationStatus.APPLIED)

    # --- Create / update ---

    async def save(self) -> CommandOutcome:
        """Submit the open editor's draft as a create or an update."""
        editor = self._ui.editor
        if editor.mode == EditorMode.CREATING:
            return await self.create(editor.draft)
        if editor.mode == EditorMode.EDITING and editor.book_id is not None:
            return await self.update(editor.book_id, editor.draft)
        return CommandOutcome("save", OperationStatus.SKIPPED)

    async def create(self, draft: BookDraft) -> CommandOutcome:
        """Create a book; new records always start as non-favorites."""
        try:
            fields = normalize_draft(draft, self._placeholder)
        except ValidationError as e:
            self._ui.notify(e.message, NotificationKind.ERROR)
            return CommandOutcome("create", OperationStatus.FAILED, error=e)

        editor = self._editor_for(EditorMode.CREATING)
        if editor is not None:
            editor.saving = True
        try:
            book = await self._remote.create({**fields, "isFavorite": False})
        except TransportError as e:
            logger.error("Book create failed", title=fields["title"], error=str(e))
            self._ui.notify(MSG_SAVE_FAILED, NotificationKind.ERROR)
            return CommandOutcome("create", OperationStatus.FAILED, error=e)
        finally:
            if editor is not None:
                editor.saving = False

        self._store.upsert(book)
        self._close_editor_if_current(editor)
        self._ui.notify(MSG_ADDED, NotificationKind.SUCCESS)
        return CommandOutcome("create", OperationStatus.APPLIED, book=book)

    async def update(self, book_id: str, draft: BookDraft) -> CommandOutcome:
        """Replace a book with the draft merged over its current full record."""
        try:
            fields = normalize_draft(draft, self._placeholder)
        except ValidationError as e:
            self._ui.notify(e.message, NotificationKind.ERROR)
            return CommandOutcome("update", OperationStatus.FAILED, error=e)

        editor = self._editor_for(EditorMode.EDITING, book_id)
        base = self._store.get(book_id)
        if base is None and editor is not None:
            base = editor.snapshot
        if base is None:
            error = MissingRecordError(book_id)
            self._ui.notify(MSG_SAVE_FAILED, NotificationKind.ERROR)
            return CommandOutcome("update", OperationStatus.FAILED, error=error)

        record = {**base.to_payload(), **fields}
        token = self._dispatch(book_id)
        if editor is not None:
            editor.saving = True
        try:
            book = await self._remote.replace(book_id, record)
        except TransportError as e:
            self._settle(book_id, token)
            logger.error("Book update failed", book_id=book_id, error=str(e))
            self._ui.notify(MSG_SAVE_FAILED, NotificationKind.ERROR)
            return CommandOutcome("update", OperationStatus.FAILED, error=e)
        finally:
            if editor is not None:
                editor.saving = False

        if not self._settle(book_id, token, lambda: self._store.upsert(book)):
            return CommandOutcome("update", OperationStatus.SUPERSEDED, book=book)

        self._close_editor_if_current(editor)
        self._ui.notify(MSG_UPDATED, NotificationKind.SUCCESS)
        return CommandOutcome("update", OperationStatus.APPLIED, book=book)

    # --- Favorites ---

    async def toggle_favorite(self, book_id: str) -> CommandOutcome:
        """Flip ``isFavorite``, leaving every other field as the store has it."""
        book = self._store.get(book_id)
        if book is None:
            self._ui.notify(MSG_FAVORITE_FAILED, NotificationKind.ERROR)
            return CommandOutcome("toggle_favorite", OperationStatus.FAILED, error=MissingRecordError(book_id))

        record = {**book.to_payload(), "isFavorite": not book.is_favorite}
        token = self._dispatch(book_id)
        try:
            updated = await self._remote.replace(book_id, record)
        except TransportError as e:
            self._settle(book_id, token)
            logger.error("Favorite toggle failed", book_id=book_id, error=str(e))
            self._ui.notify(MSG_FAVORITE_FAILED, NotificationKind.ERROR)
            return CommandOutcome("toggle_favorite", OperationStatus.FAILED, error=e)

        if not self._settle(book_id, token, lambda: self._store.upsert(updated)):
            return CommandOutcome("toggle_favorite", OperationStatus.SUPERSEDED, book=updated)

        message = MSG_FAVORITED if updated.is_favorite else MSG_UNFAVORITED
        self._ui.notify(message, NotificationKind.INFO)
        return CommandOutcome("toggle_favorite", OperationStatus.APPLIED, book=updated)

    # --- Delete ---

    def request_delete(self, book_id: str) -> None:
        """Ask for confirmation before deleting."""
        self._ui.request_delete(book_id)

    def cancel_delete(self) -> None:
        self._ui.clear_pending_delete()

    async def confirm_delete(self) -> CommandOutcome:
        """Delete the pending target. The confirmation closes whatever happens."""
        book_id = self._ui.pending_delete
        if book_id is None:
            return CommandOutcome("delete", OperationStatus.SKIPPED)

        token = self._dispatch(book_id)
        try:
            await self._remote.remove(book_id)
        except TransportError as e:
            self._settle(book_id, token)
            logger.error("Book delete failed", book_id=book_id, error=str(e))
            self._ui.notify(MSG_DELETE_FAILED, NotificationKind.ERROR)
            return CommandOutcome("delete", OperationStatus.FAILED, error=e)
        finally:
            if self._ui.pending_delete == book_id:
                self._ui.clear_pending_delete()

        if not self._settle(book_id, token, lambda: self._store.delete(book_id)):
            return CommandOutcome("delete", OperationStatus.SUPERSEDED)

        self._ui.notify(MSG_DELETED, NotificationKind.SUCCESS)
        return CommandOutcome("delete", OperationStatus.APPLIED)
