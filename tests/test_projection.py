"""Tests for the view projection."""

from bookshelf.api.schemas.books import Book
from bookshelf.core.books.projection import (
    EMPTY_FAVORITES_HINT,
    EMPTY_SEARCH_HINT,
    FilterState,
    count,
    cover_url,
    empty_hint,
    project,
    rating_label,
)

DUNE = Book(id="1", title="Dune", author="Herbert", rating=4, is_favorite=False)
EMMA = Book(id="2", title="Emma", author="Austen", rating=0, is_favorite=True)
DUNE_MESSIAH = Book(id="3", title="Dune Messiah", author="Herbert", rating=9, is_favorite=True)
BOOKS = [DUNE, EMMA, DUNE_MESSIAH]


def test_empty_query_matches_everything():
    """Test default filters return every book in order."""
    assert project(BOOKS, FilterState()) == BOOKS


def test_query_is_trimmed_and_case_insensitive():
    """Test the query is a case-insensitive substring of the title."""
    result = project(BOOKS, FilterState(query_text="  dUN "))
    assert result == [DUNE, DUNE_MESSIAH]


def test_query_matches_title_only():
    """Test author text does not match."""
    assert project(BOOKS, FilterState(query_text="austen")) == []


def test_favorites_only():
    """Test favorites-only keeps favorites in order."""
    assert project(BOOKS, FilterState(favorites_only=True)) == [EMMA, DUNE_MESSIAH]


def test_filters_combine():
    """Test both filters must hold."""
    assert project(BOOKS, FilterState(query_text="dune", favorites_only=True)) == [DUNE_MESSIAH]


def test_projection_is_pure():
    """Test repeated projections agree and leave the input untouched."""
    books = list(BOOKS)
    filters = FilterState(query_text="dune")
    first = project(books, filters)
    second = project(books, filters)
    assert first == second
    assert first is not books
    assert books == BOOKS


def test_dune_scenario():
    """Test the search/favorite walk-through on a single record."""
    store = [DUNE]
    assert project(store, FilterState(query_text="dun")) == [DUNE]
    assert project(store, FilterState(query_text="dun", favorites_only=True)) == []

    favorited = DUNE.model_copy(update={"is_favorite": True})
    assert project([favorited], FilterState(query_text="dun", favorites_only=True)) == [favorited]


def test_counts_ignore_filters():
    """Test totals cover the whole collection."""
    counts = count(BOOKS)
    assert counts.total == 3
    assert counts.favorites == 2


def test_empty_hint():
    assert empty_hint(FilterState(favorites_only=True)) == EMPTY_FAVORITES_HINT
    assert empty_hint(FilterState(query_text="zzz")) == EMPTY_SEARCH_HINT


def test_display_helpers():
    """Test rating labels clamp and covers fall back to the placeholder."""
    assert rating_label(DUNE) == "4/5"
    assert rating_label(EMMA) == "No rating"
    assert rating_label(DUNE_MESSIAH) == "5/5"
    assert cover_url(EMMA, "https://placeholder.test") == "https://placeholder.test"
