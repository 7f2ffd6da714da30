"""Filtered views and aggregates over the book collection."""

from dataclasses import dataclass
from typing import Sequence

from bookshelf.api.schemas.books import Book

EMPTY_FAVORITES_HINT = "No favorites yet. Add some hearts ♥"
EMPTY_SEARCH_HINT = "Try adding a book or changing the search."


@dataclass(frozen=True)
class FilterState:
    """Search text and favorites toggle owned by the presentation layer."""
    query_text: str = ""
    favorites_only: bool = False


@dataclass(frozen=True)
class Counts:
    total: int
    favorites: int


def project(books: Sequence[Book], filters: FilterState) -> list[Book]:
    """
    Filter books for display without touching the input.

    Args:
        books: Collection in display order
        filters: Current filter state

    Returns:
        New list keeping the input order
    """
    query = filters.query_text.strip().lower()
    return [
        book
        for book in books
        if (not filters.favorites_only or book.is_favorite)
        and (not query or query in book.title.lower())
    ]


def count(books: Sequence[Book]) -> Counts:
    """Totals over the full, unfiltered collection."""
    return Counts(
        total=len(books),
        favorites=sum(1 for book in books if book.is_favorite),
    )


def empty_hint(filters: FilterState) -> str:
    """Message shown when the projection comes back empty."""
    return EMPTY_FAVORITES_HINT if filters.favorites_only else EMPTY_SEARCH_HINT


def clamp_rating(value: float) -> int:
    return int(max(0, min(5, value)))


def rating_label(book: Book) -> str:
    rating = clamp_rating(book.rating)
    return "No rating" if rating == 0 else f"{rating}/5"


def cover_url(book: Book, placeholder: str) -> str:
    return book.cover_image or placeholder
