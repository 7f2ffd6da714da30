"""Pytest configuration and fixtures."""

import json
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from bookshelf.config import Settings
from bookshelf.core.books.remote import BooksResource
from bookshelf.core.books.session import LibrarySession, get_library_session, set_library_session
from bookshelf.core.books.ui_state import NotificationKind

API_URL = "http://books.test/api/v1/books"


class FakeBooksServer:
    """In-memory stand-in for the remote /books resource, served through httpx.MockTransport."""

    def __init__(self, books: list[dict] | None = None) -> None:
        self.books: dict[str, dict] = {}
        self.next_id = 1
        self.requests: list[httpx.Request] = []
        self.fail: dict[str, int] = {}  # method -> status code to answer with
        for book in books or []:
            self.add(book)

    def add(self, book: dict) -> dict:
        record = dict(book)
        record.setdefault("id", str(self.next_id))
        record["id"] = str(record["id"])
        self.next_id = max(self.next_id, int(record["id"])) + 1
        self.books[record["id"]] = record
        return record

    def calls(self, method: str | None = None) -> list[httpx.Request]:
        return [r for r in self.requests if method is None or r.method == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.fail:
            return httpx.Response(self.fail[request.method], json={"error": "boom"})

        parts = request.url.path.rstrip("/").split("/")
        book_id = parts[-1] if parts[-1] != "books" else None

        if request.method == "GET" and book_id is None:
            return httpx.Response(200, json=list(self.books.values()))
        if request.method == "POST" and book_id is None:
            body = json.loads(request.content)
            return httpx.Response(201, json=self.add(body))
        if book_id not in self.books:
            return httpx.Response(404, json="Not found")
        if request.method == "PUT":
            body = json.loads(request.content)
            body["id"] = book_id
            self.books[book_id] = body
            return httpx.Response(200, json=body)
        if request.method == "DELETE":
            return httpx.Response(200, json=self.books.pop(book_id))
        return httpx.Response(405)


class RecordingSink:
    """Notification sink that remembers what it was sent."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, NotificationKind]] = []

    def push(self, message: str, kind: NotificationKind) -> None:
        self.messages.append((message, kind))


@pytest.fixture
def settings() -> Settings:
    return Settings(books_api_url=API_URL, notification_duration=2.2)


@pytest.fixture
def server() -> FakeBooksServer:
    return FakeBooksServer(
        [
            {
                "id": "1",
                "title": "Dune",
                "author": "Herbert",
                "coverImage": "https://covers.test/dune.jpg",
                "description": "Spice.",
                "rating": 4,
                "isFavorite": False,
                "createdAt": "2024-01-01T00:00:00Z",
            },
            {
                "id": "2",
                "title": "Emma",
                "author": "Austen",
                "coverImage": "",
                "description": "",
                "rating": 0,
                "isFavorite": True,
            },
        ]
    )


@pytest.fixture
def make_remote(server: FakeBooksServer) -> Callable[..., BooksResource]:
    def _make(handler=None, url: str = API_URL) -> BooksResource:
        return BooksResource(url, transport=httpx.MockTransport(handler or server.handler))

    return _make


@pytest.fixture
def remote(make_remote) -> BooksResource:
    return make_remote()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def session(remote: BooksResource, settings: Settings, sink: RecordingSink) -> LibrarySession:
    return LibrarySession(remote, settings=settings, sinks=[sink])


@pytest.fixture
def client(session: LibrarySession):
    """Create a test client for the FastAPI app backed by the fake server."""
    from bookshelf.main import app

    set_library_session(session)
    app.dependency_overrides[get_library_session] = lambda: session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_library_session, None)
    set_library_session(None)
