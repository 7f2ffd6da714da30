"""Error taxonomy for the library core."""


class BookshelfError(Exception):
    """Base class for errors raised by the library core."""


class ValidationError(BookshelfError):
    """A draft was rejected locally, before any network call."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or []


class TransportError(BookshelfError):
    """The remote books resource could not complete a call.

    Non-2xx responses, network failures and undecodable bodies all collapse
    into this one kind.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        message = f"{operation} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation
        self.detail = detail


class MissingRecordError(BookshelfError):
    """An operation named a book that is not in the local collection."""

    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book {book_id} is not in the collection")
        self.book_id = book_id
