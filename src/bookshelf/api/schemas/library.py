"""Library view and intent schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from bookshelf.api.schemas.books import BookDraft
from bookshelf.core.books.commands import OperationStatus
from bookshelf.core.books.ui_state import EditorMode, NotificationKind


class BookCard(BaseModel):
    """A book as the list displays it."""
    id: str
    title: str
    author: str
    cover_url: str = Field(description="Cover image, placeholder when blank")
    description: str
    rating: int
    rating_label: str = Field(description="'No rating' or 'n/5'")
    is_favorite: bool


class CountsResponse(BaseModel):
    """Aggregates over the full collection, ignoring filters."""
    total: int
    favorites: int


class FiltersPayload(BaseModel):
    """Filter state; on requests, omitted fields keep their value."""
    query_text: Optional[str] = None
    favorites_only: Optional[bool] = None


class EditorResponse(BaseModel):
    mode: EditorMode
    book_id: Optional[str] = None
    draft: Optional[BookDraft] = None
    saving: bool = False


class NotificationResponse(BaseModel):
    message: str
    kind: NotificationKind


class LibraryViewResponse(BaseModel):
    """Everything needed to render the library screen."""
    books: list[BookCard]
    counts: CountsResponse
    filters: FiltersPayload
    loading: bool
    editor: EditorResponse
    pending_delete: Optional[str] = None
    notification: Optional[NotificationResponse] = None
    empty_hint: str


class OutcomeResponse(BaseModel):
    """How a dispatched command ended."""
    operation: str
    status: OperationStatus
    book_id: Optional[str] = None
    error: Optional[str] = None


class IntentResponse(BaseModel):
    """View after an intent, plus the command outcome when one ran."""
    outcome: Optional[OutcomeResponse] = None
    view: LibraryViewResponse
