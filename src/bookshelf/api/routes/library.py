"""Library endpoints: the view model plus one endpoint per user intent."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException

from bookshelf.api.schemas.books import DraftUpdate
from bookshelf.api.schemas.library import (
    BookCard,
    CountsResponse,
    EditorResponse,
    FiltersPayload,
    IntentResponse,
    LibraryViewResponse,
    NotificationResponse,
    OutcomeResponse,
)
from bookshelf.core.books.commands import CommandOutcome
from bookshelf.core.books.projection import clamp_rating, cover_url, rating_label
from bookshelf.core.books.session import LibrarySession, get_library_session
from bookshelf.core.errors import MissingRecordError

router = APIRouter(prefix="/v1/library", tags=["Library"])

Session = Annotated[LibrarySession, Depends(get_library_session)]


def build_view(session: LibrarySession) -> LibraryViewResponse:
    """Serialize the session's current view."""
    view = session.view()
    placeholder = session.settings.placeholder_cover_url
    editor = view.editor

    return LibraryViewResponse(
        books=[
            BookCard(
                id=b.id,
                title=b.title,
                author=b.author,
                cover_url=cover_url(b, placeholder),
                description=b.description,
                rating=clamp_rating(b.rating),
                rating_label=rating_label(b),
                is_favorite=b.is_favorite,
            )
            for b in view.books
        ],
        counts=CountsResponse(total=view.counts.total, favorites=view.counts.favorites),
        filters=FiltersPayload(
            query_text=view.filters.query_text,
            favorites_only=view.filters.favorites_only,
        ),
        loading=view.loading,
        editor=EditorResponse(
            mode=editor.mode,
            book_id=editor.book_id,
            draft=editor.draft if editor.is_open else None,
            saving=editor.saving,
        ),
        pending_delete=view.pending_delete,
        notification=(
            NotificationResponse(message=view.notification.message, kind=view.notification.kind)
            if view.notification
            else None
        ),
        empty_hint=view.empty_hint,
    )


def build_intent(session: LibrarySession, outcome: Optional[CommandOutcome] = None) -> IntentResponse:
    """Wrap the view with the outcome of the command that just ran."""
    outcome_response = None
    if outcome is not None:
        outcome_response = OutcomeResponse(
            operation=outcome.operation,
            status=outcome.status,
            book_id=outcome.book.id if outcome.book else None,
            error=str(outcome.error) if outcome.error else None,
        )
    return IntentResponse(outcome=outcome_response, view=build_view(session))


# --- View ---


@router.get("", response_model=LibraryViewResponse)
async def get_library(session: Session) -> LibraryViewResponse:
    """Current filtered books, counts and UI slots."""
    return build_view(session)


@router.post("/reload", response_model=IntentResponse)
async def reload_library(session: Session) -> IntentResponse:
    """Fetch the whole collection again from the remote resource."""
    outcome = await session.start()
    return build_intent(session, outcome)


# --- Filters ---


@router.put("/filters", response_model=IntentResponse)
async def set_filters(request: FiltersPayload, session: Session) -> IntentResponse:
    """Change search text and/or the favorites-only flag."""
    session.set_filters(query_text=request.query_text, favorites_only=request.favorites_only)
    return build_intent(session)


@router.post("/filters/favorites", response_model=IntentResponse)
async def toggle_favorites_only(session: Session) -> IntentResponse:
    session.toggle_favorites_only()
    return build_intent(session)


@router.delete("/filters/query", response_model=IntentResponse)
async def clear_query(session: Session) -> IntentResponse:
    session.clear_query()
    return build_intent(session)


# --- Editor ---


@router.post("/editor", response_model=IntentResponse)
async def open_create(session: Session) -> IntentResponse:
    """Open the editor with an empty draft."""
    session.open_create()
    return build_intent(session)


@router.patch("/editor", response_model=IntentResponse)
async def edit_draft(request: DraftUpdate, session: Session) -> IntentResponse:
    """Change draft fields; only the fields sent are applied."""
    try:
        session.edit_draft(**request.model_dump(exclude_unset=True))
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return build_intent(session)


@router.delete("/editor", response_model=IntentResponse)
async def cancel_edit(session: Session) -> IntentResponse:
    """Close the editor and discard the draft."""
    session.cancel_edit()
    return build_intent(session)


@router.post("/editor/save", response_model=IntentResponse)
async def save_draft(session: Session) -> IntentResponse:
    """
    Submit the draft.

    Creates or updates depending on how the editor was opened. Validation and
    network failures come back as an error notification, not an HTTP error.
    """
    outcome = await session.save()
    return build_intent(session, outcome)


@router.post("/editor/{book_id}", response_model=IntentResponse)
async def open_edit(book_id: str, session: Session) -> IntentResponse:
    """Open the editor seeded from an existing book."""
    try:
        session.open_edit(book_id)
    except MissingRecordError:
        raise HTTPException(status_code=404, detail="Book not found")
    return build_intent(session)


# --- Favorites & delete ---


@router.post("/books/{book_id}/favorite", response_model=IntentResponse)
async def toggle_favorite(book_id: str, session: Session) -> IntentResponse:
    outcome = await session.toggle_favorite(book_id)
    return build_intent(session, outcome)


@router.post("/books/{book_id}/delete", response_model=IntentResponse)
async def ask_delete(book_id: str, session: Session) -> IntentResponse:
    """Hold a book as the pending delete until confirmed or cancelled."""
    session.ask_delete(book_id)
    return build_intent(session)


@router.post("/delete/confirm", response_model=IntentResponse)
async def confirm_delete(session: Session) -> IntentResponse:
    outcome = await session.confirm_delete()
    return build_intent(session, outcome)


@router.delete("/delete", response_model=IntentResponse)
async def cancel_delete(session: Session) -> IntentResponse:
    session.cancel_delete()
    return build_intent(session)


# --- Notification ---


@router.delete("/notification", response_model=IntentResponse)
async def dismiss_notification(session: Session) -> IntentResponse:
    session.dismiss_notification()
    return build_intent(session)
