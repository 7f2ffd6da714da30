"""Short-lived UI state: editor, delete confirmation and notifications."""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Protocol

import structlog

from bookshelf.api.schemas.books import Book, BookDraft

logger = structlog.get_logger(__name__)


class EditorMode(str, Enum):
    """What the editor is currently open for."""
    NONE = "none"
    CREATING = "creating"
    EDITING = "editing"


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    """A message visible until ``expires_at`` (clock seconds)."""
    message: str
    kind: NotificationKind
    expires_at: float


class NotificationSink(Protocol):
    """Anything that can display a notification."""

    def push(self, message: str, kind: NotificationKind) -> None:
        ...


class LoggingSink:
    """Default sink: writes every notification to the structured log."""

    def push(self, message: str, kind: NotificationKind) -> None:
        if kind == NotificationKind.ERROR:
            logger.warning("Notification", message=message, kind=kind.value)
        else:
            logger.info("Notification", message=message, kind=kind.value)


class NotificationCenter:
    """Single notification slot with timed dismissal.

    A new notification replaces the current one and reschedules the clear;
    timers never stack. Expiry is also checked on read, so the slot is right
    even when no event loop is running to fire the timer.
    """

    def __init__(
        self,
        duration: float = 2.2,
        sinks: Optional[list[NotificationSink]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.duration = duration
        self._sinks: list[NotificationSink] = list(sinks) if sinks is not None else [LoggingSink()]
        self._clock = clock
        self._current: Optional[Notification] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    def add_sink(self, sink: NotificationSink) -> None:
        self._sinks.append(sink)

    @property
    def current(self) -> Optional[Notification]:
        """The visible notification, or None once it has expired."""
        if self._current is not None and self._clock() >= self._current.expires_at:
            self._current = None
        return self._current

    def notify(self, message: str, kind: NotificationKind = NotificationKind.SUCCESS) -> Notification:
        """Show a message, replacing whatever is currently shown."""
        notification = Notification(
            message=message,
            kind=kind,
            expires_at=self._clock() + self.duration,
        )
        self._current = notification
        self._schedule_clear(notification)

        for sink in self._sinks:
            sink.push(message, kind)
        return notification

    def dismiss(self) -> None:
        """Clear the slot immediately."""
        self._cancel_timer()
        self._current = None

    def _schedule_clear(self, notification: Notification) -> None:
        self._cancel_timer()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timer = loop.call_later(self.duration, self._expire, notification)

    def _expire(self, notification: Notification) -> None:
        self._timer = None
        if self._current is notification:
            self._current = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


@dataclass
class EditorState:
    """Editor target plus the draft being staged in it."""
    mode: EditorMode = EditorMode.NONE
    book_id: Optional[str] = None
    draft: BookDraft = field(default_factory=BookDraft)
    snapshot: Optional[Book] = None  # record as it was when the editor opened
    saving: bool = False

    @property
    def is_open(self) -> bool:
        return self.mode != EditorMode.NONE

    def targets(self, mode: EditorMode, book_id: Optional[str] = None) -> bool:
        return self.mode == mode and self.book_id == book_id


class TransientUIState:
    """Editor, pending-delete and notification slots."""

    def __init__(self, notifications: Optional[NotificationCenter] = None) -> None:
        self.editor = EditorState()
        self.pending_delete: Optional[str] = None
        self.notifications = notifications or NotificationCenter()

    # --- Editor ---

    def open_create(self) -> EditorState:
        """Open the editor with an empty draft."""
        self.editor = EditorState(mode=EditorMode.CREATING)
        return self.editor

    def open_edit(self, book: Book) -> EditorState:
        """Open the editor seeded from an existing record."""
        self.editor = EditorState(
            mode=EditorMode.EDITING,
            book_id=book.id,
            draft=BookDraft.from_book(book),
            snapshot=book,
        )
        return self.editor

    def update_draft(self, **fields: Any) -> BookDraft:
        """Apply field edits to the open draft; unknown names are rejected."""
        if not self.editor.is_open:
            raise RuntimeError("Editor is not open")
        current = self.editor.draft.model_dump()
        unknown = set(fields) - set(current)
        if unknown:
            raise ValueError(f"Unknown draft fields: {', '.join(sorted(unknown))}")
        current.update(fields)
        self.editor.draft = BookDraft.model_validate(current)
        return self.editor.draft

    def close_editor(self) -> None:
        """Close the editor and discard its draft."""
        self.editor = EditorState()

    # --- Delete confirmation ---

    def request_delete(self, book_id: str) -> None:
        self.pending_delete = book_id

    def clear_pending_delete(self) -> None:
        self.pending_delete = None

    # --- Notifications ---

    def notify(self, message: str, kind: NotificationKind = NotificationKind.SUCCESS) -> Notification:
        return self.notifications.notify(message, kind)

    @property
    def notification(self) -> Optional[Notification]:
        return self.notifications.current
