"""Client for the remote books REST resource."""

from typing import Any

import httpx
import pydantic
import structlog

from bookshelf.api.schemas.books import Book
from bookshelf.core.errors import TransportError

logger = structlog.get_logger(__name__)


class BooksResource:
    """One coroutine per verb against a single ``/books`` collection endpoint.

    Every failure (non-2xx status, network error, undecodable body) is raised
    as :class:`TransportError`. Nothing is retried here.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def configured(self) -> bool:
        """Whether an endpoint URL was supplied at all."""
        return bool(self.base_url)

    def _item_url(self, book_id: str) -> str:
        return f"{self.base_url}/{book_id}"

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Books request failed", method=method, url=url, error=str(e))
            raise TransportError(method, str(e)) from e
        return response

    @staticmethod
    def _decode_book(operation: str, response: httpx.Response) -> Book:
        try:
            return Book.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            logger.error("Books response could not be decoded", operation=operation, error=str(e))
            raise TransportError(operation, "invalid response body") from e

    async def list(self) -> list[Book]:
        """
        Fetch the whole collection.

        Returns:
            Books in server order; an empty list if the body is not an array
        """
        response = await self._send("GET", self.base_url)
        try:
            data = response.json()
        except ValueError as e:
            logger.error("Books response could not be decoded", operation="GET", error=str(e))
            raise TransportError("GET", "invalid response body") from e

        if not isinstance(data, list):
            logger.warning("Books listing was not an array", payload_type=type(data).__name__)
            return []

        try:
            books = [Book.model_validate(item) for item in data]
        except pydantic.ValidationError as e:
            logger.error("Books listing could not be decoded", error=str(e))
            raise TransportError("GET", "invalid response body") from e

        logger.info("Books listed", count=len(books))
        return books

    async def create(self, fields: dict[str, Any]) -> Book:
        """
        Create a record; the server assigns its ``id``.

        Args:
            fields: JSON body in wire (camelCase) form; any ``id`` is dropped
        """
        body = {key: value for key, value in fields.items() if key != "id"}
        response = await self._send("POST", self.base_url, json=body)
        book = self._decode_book("POST", response)
        logger.info("Book created", book_id=book.id)
        return book

    async def replace(self, book_id: str, record: dict[str, Any]) -> Book:
        """
        Overwrite a record entirely (PUT semantics, not a patch).

        Args:
            book_id: Record to overwrite
            record: Complete desired record in wire form
        """
        response = await self._send("PUT", self._item_url(book_id), json=record)
        book = self._decode_book("PUT", response)
        logger.info("Book replaced", book_id=book.id)
        return book

    async def remove(self, book_id: str) -> None:
        """Delete a record. The response body is ignored."""
        await self._send("DELETE", self._item_url(book_id))
        logger.info("Book removed", book_id=book_id)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "BooksResource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
