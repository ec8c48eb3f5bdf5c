import pytest

from bson import ObjectId

from campus_social.db.mongo import comments_collection, posts_collection


@pytest.mark.asyncio
async def test_create_post_extracts_hashtags(client, make_user):
    alice = await make_user()
    res = await client.post(
        "/api/posts",
        json={"caption": "Tech fest tonight #TechFest", "tags": ["#coding", "techfest"]},
        headers=alice["headers"],
    )
    assert res.status_code == 201
    post = res.json()["post"]
    assert post["author"]["id"] == alice["id"]
    assert post["tags"] == ["techfest", "coding"]
    assert post["likesCount"] == 0
    assert post["postType"] == "text"
    assert "likes" not in post


@pytest.mark.asyncio
async def test_create_post_with_image_url(client, make_user):
    alice = await make_user()
    res = await client.post(
        "/api/posts",
        json={"caption": "Sunset", "imageUrl": "https://cdn.example.com/a.jpg"},
        headers=alice["headers"],
    )
    post = res.json()["post"]
    assert post["postType"] == "image"
    assert post["media"][0]["url"] == "https://cdn.example.com/a.jpg"


@pytest.mark.asyncio
async def test_caption_too_long_is_rejected_with_field_error(client, make_user):
    alice = await make_user()
    res = await client.post("/api/posts", json={"caption": "x" * 501}, headers=alice["headers"])
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Invalid input"
    assert any(e["field"] == "caption" for e in body["errors"])


@pytest.mark.asyncio
async def test_empty_post_is_rejected(client, make_user):
    alice = await make_user()
    res = await client.post("/api/posts", json={"caption": "   "}, headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "caption"


@pytest.mark.asyncio
async def test_create_post_requires_auth(client):
    res = await client.post("/api/posts", json={"caption": "hi"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_get_post_and_malformed_id(client, make_user, make_post):
    alice = await make_user()
    post = await make_post(alice)

    res = await client.get(f"/api/posts/{post['id']}")
    assert res.status_code == 200
    assert res.json()["post"]["caption"] == "Hello campus"

    bad = await client.get("/api/posts/12345")
    assert bad.status_code == 400
    assert bad.json()["message"] == "Invalid post ID format"


@pytest.mark.asyncio
async def test_private_post_hidden_from_others(client, make_user, make_post):
    alice = await make_user()
    bob = await make_user()
    post = await make_post(alice, isPublic=False)

    assert (await client.get(f"/api/posts/{post['id']}", headers=alice["headers"])).status_code == 200
    assert (await client.get(f"/api/posts/{post['id']}", headers=bob["headers"])).status_code == 404

    feed = (await client.get("/api/posts")).json()["posts"]
    assert post["id"] not in [p["id"] for p in feed]


@pytest.mark.asyncio
async def test_only_author_can_update_or_delete(client, make_user, make_post):
    alice = await make_user()
    bob = await make_user()
    post = await make_post(alice)

    res = await client.put(f"/api/posts/{post['id']}", json={"caption": "hacked"}, headers=bob["headers"])
    assert res.status_code == 403
    assert res.json()["message"] == "Not authorized to update this post"

    res = await client.delete(f"/api/posts/{post['id']}", headers=bob["headers"])
    assert res.status_code == 403
    assert res.json()["message"] == "Not authorized to delete this post"

    res = await client.put(f"/api/posts/{post['id']}", json={"caption": "Edited #update"}, headers=alice["headers"])
    assert res.status_code == 200
    assert res.json()["post"]["caption"] == "Edited #update"
    assert res.json()["post"]["tags"] == ["update"]


@pytest.mark.asyncio
async def test_delete_post_removes_comments_and_decrements_count(client, make_user, make_post):
    alice = await make_user()
    post = await make_post(alice)
    await client.post(f"/api/posts/{post['id']}/comments", json={"content": "nice"}, headers=alice["headers"])

    profile = (await client.get(f"/api/users/{alice['id']}")).json()["user"]
    assert profile["postsCount"] == 1

    res = await client.delete(f"/api/posts/{post['id']}", headers=alice["headers"])
    assert res.status_code == 200
    assert res.json()["message"] == "Post deleted successfully"

    assert (await client.get(f"/api/posts/{post['id']}")).status_code == 404
    assert await comments_collection.count_documents({"post_id": post["id"]}) == 0
    profile = (await client.get(f"/api/users/{alice['id']}")).json()["user"]
    assert profile["postsCount"] == 0


@pytest.mark.asyncio
async def test_like_toggles_and_restores_count(client, make_user, make_post):
    alice = await make_user()
    bob = await make_user()
    post = await make_post(alice)

    first = await client.post(f"/api/posts/{post['id']}/like", headers=bob["headers"])
    assert first.json() == {"likesCount": 1, "liked": True}

    seen = (await client.get(f"/api/posts/{post['id']}", headers=bob["headers"])).json()["post"]
    assert seen["isLiked"] is True

    second = await client.post(f"/api/posts/{post['id']}/like", headers=bob["headers"])
    assert second.json() == {"likesCount": 0, "liked": False}


@pytest.mark.asyncio
async def test_comments_flow(client, make_user, make_post):
    alice = await make_user("Alice Shah")
    bob = await make_user("Bob Mehta")
    carol = await make_user("Carol Joshi")
    post = await make_post(alice)

    res = await client.post(f"/api/posts/{post['id']}/comments", json={"content": "Great pic"}, headers=bob["headers"])
    assert res.status_code == 201
    comment = res.json()["comment"]
    assert comment["author"]["name"] == "Bob Mehta"
    assert comment["postId"] == post["id"]

    listed = (await client.get(f"/api/posts/{post['id']}/comments")).json()["comments"]
    assert [c["id"] for c in listed] == [comment["id"]]
    assert (await client.get(f"/api/posts/{post['id']}")).json()["post"]["commentsCount"] == 1

    liked = await client.post(f"/api/posts/comments/{comment['id']}/like", headers=alice["headers"])
    assert liked.json() == {"likesCount": 1, "liked": True}

    # A stranger cannot remove it, the post author can
    assert (await client.delete(f"/api/posts/comments/{comment['id']}", headers=carol["headers"])).status_code == 403
    res = await client.delete(f"/api/posts/comments/{comment['id']}", headers=alice["headers"])
    assert res.status_code == 200
    assert (await client.get(f"/api/posts/{post['id']}")).json()["post"]["commentsCount"] == 0


@pytest.mark.asyncio
async def test_blank_comment_is_rejected(client, make_user, make_post):
    alice = await make_user()
    post = await make_post(alice)
    res = await client.post(f"/api/posts/{post['id']}/comments", json={"content": ""}, headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "content"


@pytest.mark.asyncio
async def test_private_post_cannot_be_engaged_by_others(client, make_user, make_post):
    alice = await make_user("Alice Shah")
    bob = await make_user("Bob Mehta")
    post = await make_post(alice, caption="Just for me", isPublic=False)
    url = f"/api/posts/{post['id']}"

    assert (await client.get(url, headers=bob["headers"])).status_code == 404
    assert (await client.get(f"{url}/comments", headers=bob["headers"])).status_code == 404
    res = await client.post(f"{url}/comments", json={"content": "peek"}, headers=bob["headers"])
    assert res.status_code == 404
    res = await client.post(f"{url}/like", headers=bob["headers"])
    assert res.status_code == 404
    assert res.json()["message"] == "Post not found"

    stored = await posts_collection.find_one({"_id": ObjectId(post["id"])})
    assert stored["likes_count"] == 0
    assert stored["comments_count"] == 0
    inbox = await client.get("/api/notifications", headers=alice["headers"])
    assert inbox.json()["notifications"] == []


@pytest.mark.asyncio
async def test_author_can_engage_with_own_private_post(client, make_user, make_post):
    alice = await make_user()
    post = await make_post(alice, caption="Draft", isPublic=False)
    url = f"/api/posts/{post['id']}"

    assert (await client.post(f"{url}/like", headers=alice["headers"])).json()["liked"] is True
    comment = await client.post(f"{url}/comments", json={"content": "note to self"}, headers=alice["headers"])
    assert comment.status_code == 201
    assert len((await client.get(f"{url}/comments", headers=alice["headers"])).json()["comments"]) == 1


@pytest.mark.asyncio
async def test_comment_on_post_made_private_cannot_be_liked(client, make_user, make_post):
    alice = await make_user()
    bob = await make_user("Bob Mehta")
    post = await make_post(alice, caption="Open for now")
    comment = await client.post(
        f"/api/posts/{post['id']}/comments", json={"content": "nice"}, headers=alice["headers"]
    )
    await client.put(f"/api/posts/{post['id']}", json={"isPublic": False}, headers=alice["headers"])

    res = await client.post(f"/api/posts/comments/{comment.json()['comment']['id']}/like", headers=bob["headers"])
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_profanity_is_censored_and_flagged(client, make_user, make_post):
    alice = await make_user()
    flagged = await make_post(alice, caption="what the sh1t")
    plain = await make_post(alice, caption="Quiz night at the library")

    assert (await posts_collection.find_one({"_id": ObjectId(flagged["id"])}))["is_flagged"] is True
    assert (await posts_collection.find_one({"_id": ObjectId(plain["id"])}))["is_flagged"] is False
    assert "is_flagged" not in flagged and "isFlagged" not in flagged

    res = await client.post(
        f"/api/posts/{plain['id']}/comments", json={"content": "sh1t take"}, headers=alice["headers"]
    )
    stored = await comments_collection.find_one({"_id": ObjectId(res.json()["comment"]["id"])})
    assert stored["is_flagged"] is True
