import asyncio

import pytest

from campus_social.config import SEARCH_HISTORY_SIZE
from campus_social.db.mongo import search_history_collection
from campus_social.schemas.search_schema import HashtagHit
from campus_social.services.search_service import MongoRegexSearch, SearchBackend, set_search_backend


@pytest.mark.asyncio
async def test_blank_query_is_rejected(client, make_user):
    alice = await make_user()
    res = await client.get("/api/search?q=%20%20", headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["message"] == "Search query is required"

    assert (await client.get("/api/search/users", headers=alice["headers"])).status_code == 400


@pytest.mark.asyncio
async def test_search_requires_auth(client):
    assert (await client.get("/api/search?q=x")).status_code == 401


@pytest.mark.asyncio
async def test_user_search_ranks_prefix_matches_first(client, make_user):
    searcher = await make_user("Zed Searcher")
    await make_user("Ariya Kapoor")
    await make_user("Riya Shah")

    res = await client.get("/api/search/users?q=riya", headers=searcher["headers"])
    body = res.json()
    assert body["total"] == 2
    assert [u["name"] for u in body["results"]] == ["Riya Shah", "Ariya Kapoor"]


@pytest.mark.asyncio
async def test_query_is_matched_literally(client, make_user, make_post):
    alice = await make_user()
    await make_post(alice, caption="totally unrelated")
    res = await client.get("/api/search/posts?q=.*", headers=alice["headers"])
    assert res.json()["total"] == 0


@pytest.mark.asyncio
async def test_post_search_skips_private_posts(client, make_user, make_post):
    alice = await make_user()
    public = await make_post(alice, caption="Robotics demo day")
    await make_post(alice, caption="Robotics secret plans", isPublic=False)

    res = await client.get("/api/search/posts?q=robotics", headers=alice["headers"])
    assert [p["id"] for p in res.json()["results"]] == [public["id"]]


@pytest.mark.asyncio
async def test_hashtag_search_counts_posts(client, make_user, make_post):
    alice = await make_user()
    await make_post(alice, caption="Day one #techfest")
    await make_post(alice, caption="Day two #techfest #robots")
    await make_post(alice, caption="Unrelated #food")

    res = await client.get("/api/search/hashtags?q=%23tech", headers=alice["headers"])
    body = res.json()
    assert body["total"] == 1
    assert body["results"][0]["name"] == "#techfest"
    assert body["results"][0]["postsCount"] == 2


@pytest.mark.asyncio
async def test_event_search_skips_cancelled(client, make_user):
    alice = await make_user()
    base = {
        "description": "All welcome",
        "location": "Main hall",
        "startDate": "2030-01-10T10:00:00Z",
        "endDate": "2030-01-10T12:00:00Z",
    }
    live = (await client.post("/api/events", json={**base, "title": "Garba Night"}, headers=alice["headers"])).json()["event"]
    gone = (await client.post("/api/events", json={**base, "title": "Garba Rehearsal"}, headers=alice["headers"])).json()["event"]
    await client.delete(f"/api/events/{gone['id']}", headers=alice["headers"])

    res = await client.get("/api/search/events?q=garba", headers=alice["headers"])
    assert [e["id"] for e in res.json()["results"]] == [live["id"]]


@pytest.mark.asyncio
async def test_combined_search_respects_type_filter(client, make_user, make_post):
    alice = await make_user("Campus Fest Crew")
    await make_post(alice, caption="Campus fest lineup #fest")

    res = await client.get("/api/search?q=fest", headers=alice["headers"])
    body = res.json()
    assert body["query"] == "fest"
    assert len(body["results"]["users"]) == 1
    assert len(body["results"]["posts"]) == 1
    assert body["results"]["hashtags"][0]["name"] == "#fest"
    assert body["total"] == 3

    only_posts = (await client.get("/api/search?q=fest&type=posts", headers=alice["headers"])).json()
    assert only_posts["results"]["users"] == []
    assert only_posts["total"] == 1
    assert only_posts["filters"]["type"] == "posts"


@pytest.mark.asyncio
async def test_suggestions(client, make_user):
    alice = await make_user("Meera Nair")
    short = await client.get("/api/search/suggestions?q=m", headers=alice["headers"])
    assert short.json() == {"suggestions": []}

    res = await client.get("/api/search/suggestions?q=meera", headers=alice["headers"])
    suggestion = res.json()["suggestions"][0]
    assert suggestion["type"] == "user"
    assert suggestion["id"] == alice["id"]


@pytest.mark.asyncio
async def test_trending_orders_by_usage(client, make_user, make_post):
    alice = await make_user()
    await make_post(alice, caption="#exams again")
    await make_post(alice, caption="#exams #library")
    await make_post(alice, caption="#exams #library #coffee")

    res = await client.get("/api/search/trending", headers=alice["headers"])
    names = [t["name"] for t in res.json()["trending"]]
    assert names == ["#exams", "#library", "#coffee"]


class _StubBackend(SearchBackend):
    async def trending(self, limit=10):
        return [HashtagHit(name="#stub", posts_count=99)]


@pytest.mark.asyncio
async def test_backend_is_swappable(client, make_user):
    alice = await make_user()
    set_search_backend(_StubBackend())
    try:
        res = await client.get("/api/search/trending", headers=alice["headers"])
    finally:
        set_search_backend(MongoRegexSearch())
    assert res.json()["trending"][0] == {"name": "#stub", "postsCount": 99, "lastUsed": None}


async def _save(client, user, query):
    res = await client.post("/api/search/save", json={"query": query}, headers=user["headers"])
    # Keep saves in distinct milliseconds so newest-first order is stable
    await asyncio.sleep(0.003)
    return res


@pytest.mark.asyncio
async def test_saved_searches_are_recent_first_and_deduplicated(client, make_user):
    alice = await make_user()
    bob = await make_user()
    for q in ("Tech Fest", "robotics", "tech fest"):
        res = await _save(client, alice, q)
        assert res.status_code == 200
        assert res.json() == {"message": "Search query saved"}
    await _save(client, bob, "hostel")

    res = await client.get("/api/search/recent", headers=alice["headers"])
    assert res.json() == {"recent": ["tech fest", "robotics"]}


@pytest.mark.asyncio
async def test_search_history_keeps_only_latest_entries(client, make_user):
    alice = await make_user()
    for i in range(SEARCH_HISTORY_SIZE + 2):
        await _save(client, alice, f"query {i}")

    recent = (await client.get("/api/search/recent", headers=alice["headers"])).json()["recent"]
    assert len(recent) == SEARCH_HISTORY_SIZE
    assert recent[0] == f"query {SEARCH_HISTORY_SIZE + 1}"
    assert "query 0" not in recent
    assert await search_history_collection.count_documents({"user_id": alice["id"]}) == SEARCH_HISTORY_SIZE


@pytest.mark.asyncio
async def test_blank_saved_search_is_rejected(client, make_user):
    alice = await make_user()
    res = await client.post("/api/search/save", json={"query": "  "}, headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["message"] == "Search query is required"
    assert (await client.get("/api/search/recent")).status_code == 401
