import pytest
from datetime import datetime, timedelta

from bson import ObjectId

from campus_social.db.mongo import stories_collection


async def _story(client, user, **fields):
    payload = {"content": "Library grind"}
    payload.update(fields)
    res = await client.post("/api/stories", json=payload, headers=user["headers"])
    assert res.status_code == 201, res.text
    return res.json()["story"]


@pytest.mark.asyncio
async def test_create_story_expires_in_a_day(client, make_user):
    alice = await make_user()
    story = await _story(client, alice)
    assert story["type"] == "text"
    assert story["viewsCount"] == 0

    expires = datetime.fromisoformat(story["expiresAt"].replace("Z", ""))
    created = datetime.fromisoformat(story["createdAt"].replace("Z", ""))
    assert timedelta(hours=23, minutes=59) < expires - created <= timedelta(hours=24, seconds=1)


@pytest.mark.asyncio
async def test_image_story_requires_image_url(client, make_user):
    alice = await make_user()
    res = await client.post("/api/stories", json={"content": "pic", "type": "image"}, headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "imageUrl"


@pytest.mark.asyncio
async def test_feed_groups_followed_and_own_stories(client, make_user):
    alice = await make_user("Alice Shah")
    bob = await make_user("Bob Mehta")
    carol = await make_user("Carol Joshi")
    await client.post(f"/api/users/{bob['id']}/follow", headers=alice["headers"])

    await _story(client, alice, content="mine")
    await _story(client, bob, content="bob 1")
    await _story(client, bob, content="bob 2")
    await _story(client, carol, content="carol")

    res = await client.get("/api/stories/feed", headers=alice["headers"])
    groups = res.json()["storiesByAuthor"]
    by_author = {g["author"]["id"]: [s["content"] for s in g["stories"]] for g in groups}
    assert set(by_author) == {alice["id"], bob["id"]}
    assert by_author[bob["id"]] == ["bob 2", "bob 1"]


@pytest.mark.asyncio
async def test_expired_stories_are_hidden(client, make_user):
    alice = await make_user()
    story = await _story(client, alice)
    await stories_collection.update_one(
        {"_id": ObjectId(story["id"])},
        {"$set": {"expires_at": datetime.utcnow() - timedelta(minutes=1)}},
    )
    res = await client.get(f"/api/stories/user/{alice['id']}")
    assert res.json()["stories"] == []


@pytest.mark.asyncio
async def test_views_count_once_per_viewer(client, make_user):
    alice = await make_user()
    bob = await make_user("Bob Mehta")
    story = await _story(client, alice)

    for _ in range(2):
        res = await client.post(f"/api/stories/{story['id']}/view", headers=bob["headers"])
        assert res.status_code == 200
        assert res.json() == {"message": "Story viewed successfully", "viewsCount": 1}

    viewers = await client.get(f"/api/stories/{story['id']}/viewers", headers=alice["headers"])
    assert viewers.json()["viewsCount"] == 1
    assert viewers.json()["viewers"][0]["name"] == "Bob Mehta"

    forbidden = await client.get(f"/api/stories/{story['id']}/viewers", headers=bob["headers"])
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_delete_story(client, make_user):
    alice = await make_user()
    bob = await make_user()
    story = await _story(client, alice)

    assert (await client.delete(f"/api/stories/{story['id']}", headers=bob["headers"])).status_code == 403
    res = await client.delete(f"/api/stories/{story['id']}", headers=alice["headers"])
    assert res.json()["message"] == "Story deleted successfully"
    assert (await client.get(f"/api/stories/user/{alice['id']}")).json()["stories"] == []


@pytest.mark.asyncio
async def test_deleted_or_expired_story_cannot_be_viewed(client, make_user):
    alice = await make_user()
    bob = await make_user("Bob Mehta")
    deleted = await _story(client, alice, content="gone")
    expired = await _story(client, alice, content="stale")

    await client.delete(f"/api/stories/{deleted['id']}", headers=alice["headers"])
    await stories_collection.update_one(
        {"_id": ObjectId(expired["id"])},
        {"$set": {"expires_at": datetime.utcnow() - timedelta(minutes=1)}},
    )

    for story in (deleted, expired):
        res = await client.post(f"/api/stories/{story['id']}/view", headers=bob["headers"])
        assert res.status_code == 404
        assert res.json()["message"] == "Story not found"
        doc = await stories_collection.find_one({"_id": ObjectId(story["id"])})
        assert doc["views_count"] == 0
