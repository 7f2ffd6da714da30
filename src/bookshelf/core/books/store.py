"""In-memory collection of confirmed book records."""

from typing import Iterable, Iterator, Optional

from bookshelf.api.schemas.books import Book


class CollectionStore:
    """Authoritative local copy of the remote books collection.

    Only ``load``, ``upsert`` and ``delete`` mutate it, and each of them swaps
    whole records (or the whole collection) in one step. Callers pass records
    the server has already confirmed.
    """

    def __init__(self) -> None:
        self._books: dict[str, Book] = {}  # insertion order is display order

    def load(self, records: Iterable[Book]) -> None:
        """Replace the entire contents with a fresh listing."""
        books: dict[str, Book] = {}
        for record in records:
            books[record.id] = record
        self._books = books

    def upsert(self, record: Book) -> Book:
        """Insert a record, or overwrite the one with the same id in place."""
        self._books[record.id] = record
        return record

    def delete(self, book_id: str) -> bool:
        """Remove a record. Returns False if it was not present."""
        return self._books.pop(book_id, None) is not None

    def get(self, book_id: str) -> Optional[Book]:
        """Get a book by ID."""
        return self._books.get(book_id)

    def list(self) -> list[Book]:
        """All books in insertion/fetch order."""
        return list(self._books.values())

    @property
    def total(self) -> int:
        return len(self._books)

    @property
    def favorites(self) -> int:
        return sum(1 for book in self._books.values() if book.is_favorite)

    def __len__(self) -> int:
        return len(self._books)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._books

    def __iter__(self) -> Iterator[Book]:
        return iter(self.list())
