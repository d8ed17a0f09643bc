"""
Article endpoint tests - submission, validation, lookup and the
diagnostic response headers.

Each test creates the articles it needs via the API, so test order does
not matter.
"""
import pytest
from httpx import AsyncClient


async def _create_article(client: AsyncClient, title="A", author="u1", body="b") -> dict:
    resp = await client.post("/articles", json={"title": title, "author": author, "body": body})
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Infrastructure / health
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


# ---------------------------------------------------------------------------
# Create article
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_article_returns_full_record(async_client: AsyncClient):
    resp = await async_client.post("/articles", json={
        "title": "A",
        "author": "u1",
        "body": "b",
    })
    assert resp.status_code == 201
    article = resp.json()
    assert article == {
        "id": article["id"],
        "title": "A",
        "author": "u1",
        "body": "b",
        "likes_count": 0,
        "views_count": 0,
    }
    assert isinstance(article["id"], int)


@pytest.mark.asyncio
async def test_create_article_generates_distinct_ids(async_client: AsyncClient):
    ids = [(await _create_article(async_client, title=f"T{i}"))["id"] for i in range(5)]
    assert len(set(ids)) == 5


@pytest.mark.asyncio
async def test_duplicate_title_and_author_allowed(async_client: AsyncClient):
    first = await _create_article(async_client, title="Same", author="same")
    second = await _create_article(async_client, title="Same", author="same")
    assert first["id"] != second["id"]


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["title", "author", "body"])
async def test_create_article_missing_field_rejected(async_client: AsyncClient, missing: str):
    payload = {"title": "A", "author": "u1", "body": "b"}
    del payload[missing]

    resp = await async_client.post("/articles", json=payload)
    assert resp.status_code == 400
    data = resp.json()
    assert data["error"] == "Title, author, and body are required"
    assert data["missing_fields"] == [missing]

    # Nothing was written.
    metrics = (await async_client.get("/metrics")).json()
    assert metrics["total_articles"] == 0


@pytest.mark.asyncio
async def test_create_article_blank_fields_rejected(async_client: AsyncClient):
    resp = await async_client.post("/articles", json={"title": "", "author": "   ", "body": "b"})
    assert resp.status_code == 400
    assert resp.json()["missing_fields"] == ["title", "author"]


@pytest.mark.asyncio
async def test_create_article_empty_body_rejected(async_client: AsyncClient):
    resp = await async_client.post("/articles", json={})
    assert resp.status_code == 400
    assert resp.json()["missing_fields"] == ["title", "author", "body"]


@pytest.mark.asyncio
async def test_create_article_without_payload_rejected(async_client: AsyncClient):
    resp = await async_client.post("/articles")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Request body must be a JSON object"}


@pytest.mark.asyncio
async def test_create_article_non_object_payload_rejected(async_client: AsyncClient):
    resp = await async_client.post("/articles", json=["A", "u1", "b"])
    assert resp.status_code == 400
    assert "missing_fields" not in resp.json()


@pytest.mark.asyncio
async def test_create_article_wrong_type_is_client_error(async_client: AsyncClient):
    resp = await async_client.post("/articles", json={"title": ["x"], "author": "u1", "body": "b"})
    assert resp.status_code == 400
    assert "title" in resp.json()["error"]


# ---------------------------------------------------------------------------
# Get article
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_article(async_client: AsyncClient):
    created = await _create_article(async_client, title="Readable")
    resp = await async_client.get(f"/articles/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == created


@pytest.mark.asyncio
async def test_get_article_does_not_count_as_view(async_client: AsyncClient):
    created = await _create_article(async_client)
    await async_client.get(f"/articles/{created['id']}")
    resp = await async_client.get(f"/articles/{created['id']}")
    assert resp.json()["views_count"] == 0
    assert (await async_client.get("/articles/popular")).json() == []


@pytest.mark.asyncio
async def test_article_not_found(async_client: AsyncClient):
    resp = await async_client.get("/articles/99999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Article 99999 not found"}


# ---------------------------------------------------------------------------
# Response headers
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_response_diagnostic_headers(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert "x-response-time-ms" in resp.headers
    assert resp.headers["x-query-count"] == "0"
    assert resp.headers["x-cache-command-count"] == "0"


@pytest.mark.asyncio
async def test_engagement_touches_both_stores_in_headers(async_client: AsyncClient):
    created = await _create_article(async_client)
    resp = await async_client.post(f"/articles/{created['id']}/view", json={"userId": "u2"})
    assert resp.status_code == 200
    assert int(resp.headers["x-query-count"]) >= 3
    assert resp.headers["x-cache-command-count"] == "1"
