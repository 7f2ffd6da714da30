"""Tests for the remote books resource client."""

import json

import httpx
import pytest

from bookshelf.core.errors import TransportError


@pytest.mark.asyncio
async def test_list_returns_books_in_server_order(remote):
    """Test listing decodes every record and keeps order."""
    books = await remote.list()
    assert [b.id for b in books] == ["1", "2"]
    assert books[0].cover_image == "https://covers.test/dune.jpg"
    assert books[1].is_favorite is True


@pytest.mark.asyncio
async def test_list_non_array_body_is_empty(make_remote):
    """Test a successful listing that is not an array yields no books."""
    remote = make_remote(lambda request: httpx.Response(200, json={"message": "nope"}))
    assert await remote.list() == []


@pytest.mark.asyncio
async def test_list_normalizes_numeric_ids(make_remote):
    """Test numeric ids from the server become text."""
    remote = make_remote(
        lambda request: httpx.Response(200, json=[{"id": 7, "title": "Dune", "author": "Herbert"}])
    )
    books = await remote.list()
    assert books[0].id == "7"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 404, 500, 503])
async def test_non_success_status_raises_transport_error(make_remote, status):
    """Test every non-2xx status collapses to TransportError."""
    remote = make_remote(lambda request: httpx.Response(status))
    with pytest.raises(TransportError):
        await remote.list()


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error(make_remote):
    """Test connection errors are reported as TransportError."""

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    remote = make_remote(handler)
    with pytest.raises(TransportError):
        await remote.remove("1")


@pytest.mark.asyncio
async def test_undecodable_body_raises_transport_error(make_remote):
    """Test a 2xx response that is not a book is a TransportError too."""
    remote = make_remote(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(TransportError):
        await remote.replace("1", {"id": "1", "title": "Dune"})


@pytest.mark.asyncio
async def test_create_posts_without_id(remote, server):
    """Test create drops any id and returns the server-assigned one."""
    book = await remote.create({"id": "999", "title": "Emma", "author": "Austen"})

    request = server.calls("POST")[0]
    assert str(request.url) == remote.base_url
    assert "id" not in json.loads(request.content)
    assert book.id == "3"


@pytest.mark.asyncio
async def test_replace_puts_full_record_to_item_url(remote, server):
    """Test replace sends the whole record to /books/{id}."""
    record = {"id": "1", "title": "Dune", "author": "Herbert", "rating": 5, "createdAt": "x"}
    book = await remote.replace("1", record)

    request = server.calls("PUT")[0]
    assert str(request.url) == f"{remote.base_url}/1"
    assert json.loads(request.content) == record
    assert book.rating == 5
    assert book.to_payload()["createdAt"] == "x"


@pytest.mark.asyncio
async def test_remove_deletes_item(remote, server):
    """Test remove issues DELETE against the item URL."""
    await remote.remove("2")
    assert str(server.calls("DELETE")[0].url) == f"{remote.base_url}/2"
    assert "2" not in server.books


@pytest.mark.asyncio
async def test_no_retries(make_remote):
    """Test a failed call is attempted exactly once."""
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(500)

    remote = make_remote(handler)
    with pytest.raises(TransportError):
        await remote.create({"title": "Dune", "author": "Herbert"})
    assert len(attempts) == 1


def test_configured_reflects_url(make_remote):
    """Test an empty URL marks the client as unconfigured."""
    assert make_remote().configured is True
    assert make_remote(url="").configured is False
